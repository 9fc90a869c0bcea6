"""CI provider job control.

CircleCI exposes a cooperative halt: ``circleci-agent step halt`` ends the
current job successfully after the running step. relci uses it to skip jobs
for releases that a change does not touch.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relci.core.result import Err, Ok, Result
from relci.platform.process import run as run_process

__all__ = ["CircleCiAgent", "HaltFailed", "JobHalterProtocol"]

_AGENT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class HaltFailed:
    """The CI agent could not halt the job."""

    message: str
    hint: str | None = None


class JobHalterProtocol(Protocol):
    def halt(self) -> Result[None, HaltFailed]:
        """Stop the current job after this step; not an error for the job."""
        ...


class CircleCiAgent:
    """Halts jobs through the CircleCI agent binary."""

    def __init__(self, cwd: Path, executable: str = "circleci-agent") -> None:
        self.cwd = cwd
        self.executable = executable

    def halt(self) -> Result[None, HaltFailed]:
        result = run_process(
            [self.executable, "step", "halt"],
            cwd=self.cwd,
            timeout=_AGENT_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(
                HaltFailed(
                    message=f"{self.executable} step halt failed",
                    hint=result.error.output or None,
                )
            )
        return Ok(None)
