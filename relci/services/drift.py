"""Detect a committed pipeline artifact that no longer matches its templates.

The check regenerates the artifact in place and asks git whether anything
under the artifact's directory now differs. Generation is deterministic, so
a clean checkout with an up-to-date artifact always comes out clean.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from relci.core.config import Settings
from relci.core.result import Err, Ok, Result
from relci.git.repository import VcsProtocol
from relci.services.assembler import AssembledConfig
from relci.services.changes import VcsQueryError
from relci.services.pipeline import RegenerateError, regenerate
from relci.services.validator import ValidatorProtocol

__all__ = ["DriftError", "DriftReport", "DriftStatus", "check_drift"]


class DriftStatus(Enum):
    CLEAN = "clean"
    DRIFTED = "drifted"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class DriftReport:
    status: DriftStatus
    config: AssembledConfig
    differing: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return self.status == DriftStatus.CLEAN


DriftError = RegenerateError


def check_drift(
    settings: Settings,
    vcs: VcsProtocol,
    validator: ValidatorProtocol,
) -> Result[DriftReport, DriftError]:
    regenerated = regenerate(settings, vcs, validator)
    if isinstance(regenerated, Err):
        return regenerated

    scope = settings.output_path.parent
    diff = vcs.diff_names_only(scope)
    if isinstance(diff, Err):
        return Err(VcsQueryError("index", "working tree", diff.error.message))

    differing = tuple(sorted(set(diff.value)))
    status = DriftStatus.DRIFTED if differing else DriftStatus.CLEAN
    return Ok(DriftReport(status=status, config=regenerated.value, differing=differing))
