"""Git repository abstraction.

``Repository`` answers the two questions relci asks of version control:
which files changed between two revisions, and which files under a
directory differ from the index. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.changed_paths("master", "HEAD"):
        case Ok(paths):
            print("\n".join(paths))
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relci.core.result import Err, Ok, Result
from relci.platform.process import ProcessError
from relci.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "Repository",
    "VcsProtocol",
    "find_repo_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class VcsProtocol(Protocol):
    """What relci needs from version control."""

    def changed_paths(self, from_revision: str, to_revision: str) -> Result[list[str], GitError]:
        """Paths added, modified or deleted between two revisions."""
        ...

    def diff_names_only(self, scope: Path) -> Result[list[str], GitError]:
        """Paths under ``scope`` whose working tree differs from the index."""
        ...


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def changed_paths(self, from_revision: str, to_revision: str) -> Result[list[str], GitError]:
        """List paths changed on ``to_revision`` since it forked from ``from_revision``.

        Runs `git diff --name-only -z <from>...<to>` so commits landing on the
        baseline after the fork point are not attributed to this change.
        NUL-separated output keeps non-ASCII paths unquoted.

        Returns:
            Ok(paths) in git's output order
            Err(GitError) if a revision is unknown or git fails
        """
        revision_range = f"{from_revision}...{to_revision}"
        result = self._run(["diff", "--name-only", "-z", revision_range])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=f"diff --name-only {revision_range}",
                        message=e.stderr.strip() or "git diff failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(_split_paths(stdout))

    def diff_names_only(self, scope: Path) -> Result[list[str], GitError]:
        """List paths under ``scope`` that differ from the index.

        Returns:
            Ok(paths), empty when the scope is clean
            Err(GitError) on failure
        """
        rel = _relative_to(scope, self.path)
        result = self._run(["diff", "--name-only", "-z", "--", rel])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=f"diff --name-only -- {rel}",
                        message=e.stderr.strip() or "git diff failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(_split_paths(stdout))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )


def find_repo_root(start: Path) -> Path | None:
    """Return the git toplevel containing ``start``, or None outside a repository."""
    result = run_process(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=start,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return None
    top = result.value.strip()
    return Path(top) if top else None


def _split_paths(output: str) -> list[str]:
    # -z output: NUL-terminated, never C-quoted, whitespace is significant
    return [p for p in output.split("\0") if p]


def _relative_to(scope: Path, root: Path) -> str:
    if not scope.is_absolute():
        return scope.as_posix()
    try:
        return scope.relative_to(root).as_posix()
    except ValueError:
        return scope.as_posix()
