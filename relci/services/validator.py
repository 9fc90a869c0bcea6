"""Syntax validation of the generated pipeline.

The CircleCI CLI is run from its container image so CI machines and
developer laptops only need docker. The config text is written to a
temporary directory that is mounted into the container.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relci.core.config import ValidatorConfig
from relci.core.result import Err, Ok, Result
from relci.platform.files import atomic_write_text
from relci.platform.process import run as run_process

__all__ = ["DockerValidator", "InvalidConfig", "NoopValidator", "ValidatorProtocol"]

_VALIDATOR_TIMEOUT_SECONDS = 5 * 60.0
_MOUNT_POINT = "/data"
_CONFIG_NAME = "config.yml"


@dataclass(frozen=True, slots=True)
class InvalidConfig:
    """The validator rejected the config, or could not be run at all."""

    diagnostics: str
    returncode: int = 1

    @property
    def message(self) -> str:
        return f"generated config failed validation (exit {self.returncode})"

    @property
    def hint(self) -> str | None:
        return self.diagnostics or None


class ValidatorProtocol(Protocol):
    def validate(self, text: str) -> Result[None, InvalidConfig]: ...


class DockerValidator:
    """Runs ``circleci config validate`` inside its container image."""

    def __init__(self, config: ValidatorConfig, cwd: Path, docker: str = "docker") -> None:
        self.config = config
        self.cwd = cwd
        self.docker = docker

    def command(self, mount: Path) -> list[str]:
        return [
            self.docker,
            "run",
            "--rm",
            "-v",
            f"{mount}:{_MOUNT_POINT}",
            self.config.image,
            "config",
            "validate",
            f"{_MOUNT_POINT}/{_CONFIG_NAME}",
        ]

    def validate(self, text: str) -> Result[None, InvalidConfig]:
        with tempfile.TemporaryDirectory(prefix="relci-validate-") as tmp:
            mount = Path(tmp)
            atomic_write_text(mount / _CONFIG_NAME, text)
            result = run_process(
                self.command(mount),
                cwd=self.cwd,
                timeout=_VALIDATOR_TIMEOUT_SECONDS,
            )
        if isinstance(result, Err):
            e = result.error
            return Err(InvalidConfig(diagnostics=e.output, returncode=e.returncode))
        return Ok(None)


class NoopValidator:
    """Accepts everything; used when validation is disabled."""

    def validate(self, text: str) -> Result[None, InvalidConfig]:
        return Ok(None)
