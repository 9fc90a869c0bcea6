"""Decide whether the current CI job has anything to do.

Each release flavor gets its own job. A job only needs to run when the
change touches that release's directory, or touches something outside
``releases/`` (shared tooling, CI config) that could affect every release.
Jobs with nothing to do are halted through the CI agent, which ends them
successfully.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from relci.core.config import ENV_JOB_NAME, ENV_RELEASE_TAG, Settings
from relci.core.result import Err, Ok, Result
from relci.git.repository import VcsProtocol
from relci.platform.ci import HaltFailed, JobHalterProtocol
from relci.release.codec import RELEASES_DIR, MalformedReference, ReleasePath, decode
from relci.services.changes import ChangeRecord, VcsQueryError, query_changes

__all__ = [
    "MissingReleaseContext",
    "ScopeDecision",
    "ScopeError",
    "ScopeReport",
    "active_release_path",
    "evaluate_scope",
]

_RELEASES_PREFIX = f"^{RELEASES_DIR}/"


@dataclass(frozen=True, slots=True)
class MissingReleaseContext:
    """Neither environment variable naming the active release is set."""

    variables: tuple[str, ...] = (ENV_RELEASE_TAG, ENV_JOB_NAME)

    @property
    def message(self) -> str:
        return "no active release: " + " and ".join(self.variables) + " are unset"

    @property
    def hint(self) -> str:
        return "run inside a CI job, or export one of them (e.g. CIRCLE_JOB=dogwood.3-fun)"


class ScopeDecision(Enum):
    """Three-way outcome; only OUT_OF_SCOPE stops the job."""

    GLOBAL = "global"
    IN_SCOPE = "in-scope"
    OUT_OF_SCOPE = "out-of-scope"

    def __str__(self) -> str:
        return self.value

    @property
    def should_run(self) -> bool:
        return self != ScopeDecision.OUT_OF_SCOPE


@dataclass(frozen=True, slots=True)
class ScopeReport:
    """Outcome of a scope evaluation.

    Attributes:
        decision: What the job should do.
        reference: The active release reference that was evaluated.
        changes: The change record the decision was based on.
        evidence: Changed paths that drove the decision (empty when out of scope).
        path: The decoded release path; None for a global decision.
    """

    decision: ScopeDecision
    reference: str
    changes: ChangeRecord
    evidence: tuple[str, ...] = ()
    path: ReleasePath | None = None


ScopeError = MissingReleaseContext | MalformedReference | VcsQueryError | HaltFailed


def active_release_path(
    settings: Settings,
) -> Result[ReleasePath, MissingReleaseContext | MalformedReference]:
    """Decode the release this job was started for."""
    reference = settings.active_reference
    if reference is None:
        return Err(MissingReleaseContext())
    return decode(reference)


def evaluate_scope(
    settings: Settings,
    vcs: VcsProtocol,
    halter: JobHalterProtocol,
) -> Result[ScopeReport, ScopeError]:
    """Classify the active release against the current change.

    Halts the job (exactly once) when the release is out of scope.
    """
    reference = settings.active_reference
    if reference is None:
        return Err(MissingReleaseContext())

    changes_result = query_changes(vcs, settings.base_revision, settings.target_revision)
    if isinstance(changes_result, Err):
        return changes_result
    changes = changes_result.value

    inside = set(changes.matching(_RELEASES_PREFIX))
    outside = tuple(p for p in changes.paths if p not in inside)
    if outside:
        return Ok(
            ScopeReport(
                decision=ScopeDecision.GLOBAL,
                reference=reference,
                changes=changes,
                evidence=outside,
            )
        )

    decoded = decode(reference)
    if isinstance(decoded, Err):
        return decoded
    path = decoded.value

    touched = changes.matching(path.prefix_pattern())
    if touched:
        return Ok(
            ScopeReport(
                decision=ScopeDecision.IN_SCOPE,
                reference=reference,
                changes=changes,
                evidence=touched,
                path=path,
            )
        )

    halted = halter.halt()
    if isinstance(halted, Err):
        return halted
    return Ok(
        ScopeReport(
            decision=ScopeDecision.OUT_OF_SCOPE,
            reference=reference,
            changes=changes,
            path=path,
        )
    )
