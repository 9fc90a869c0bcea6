"""Files changed between the baseline and the commit under test."""

from __future__ import annotations

import re
from dataclasses import dataclass

from relci.core.result import Err, Ok, Result
from relci.git.repository import VcsProtocol

__all__ = ["ChangeRecord", "VcsQueryError", "query_changes"]


@dataclass(frozen=True, slots=True)
class VcsQueryError:
    """The VCS could not list changes (unknown revision, git failure)."""

    from_revision: str
    to_revision: str
    detail: str

    @property
    def message(self) -> str:
        return f"cannot list changes between {self.from_revision} and {self.to_revision}"

    @property
    def hint(self) -> str | None:
        return self.detail or None


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """Sorted, de-duplicated repository paths touched by a change."""

    from_revision: str
    to_revision: str
    paths: tuple[str, ...] = ()

    @classmethod
    def of(cls, from_revision: str, to_revision: str, paths: list[str]) -> ChangeRecord:
        return cls(from_revision, to_revision, tuple(sorted(set(paths))))

    def __len__(self) -> int:
        return len(self.paths)

    def matching(self, pattern: str) -> tuple[str, ...]:
        """Paths where ``pattern`` is found (``re.search``, not a full match)."""
        regex = re.compile(pattern)
        return tuple(p for p in self.paths if regex.search(p))

    def contains(self, pattern: str) -> bool:
        regex = re.compile(pattern)
        return any(regex.search(p) for p in self.paths)


def query_changes(
    vcs: VcsProtocol,
    from_revision: str,
    to_revision: str,
) -> Result[ChangeRecord, VcsQueryError]:
    result = vcs.changed_paths(from_revision, to_revision)
    if isinstance(result, Err):
        return Err(VcsQueryError(from_revision, to_revision, result.error.message))
    return Ok(ChangeRecord.of(from_revision, to_revision, result.value))
