"""Exit codes for CLI operations.

CI jobs key off these values, so they must remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success (including a cooperative job halt)
    - 1: User error (malformed release reference, bad relci.toml)
    - 2: Environment error (CI agent unavailable)
    - 3: Template error (missing markers, validator rejected the output)
    - 4: VCS error (git diff failed, unknown revision)
    - 5: I/O error (template missing, artifact not writable)
    - 6: Drift (generated artifact differs from the committed one)
    - 20: No active release in the environment
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    TEMPLATE_ERROR = 3
    VCS_ERROR = 4
    IO_ERROR = 5
    DRIFT = 6
    MISSING_RELEASE_CONTEXT = 20

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
