"""Git operations.

Usage:
    from relci.git import Repository

    repo = Repository(Path("/path/to/repo"))
    paths = repo.changed_paths("master", "HEAD")
"""

from relci.git.repository import (
    GitError,
    Repository,
    VcsProtocol,
    find_repo_root,
)

__all__ = [
    "GitError",
    "Repository",
    "VcsProtocol",
    "find_repo_root",
]
