"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relci.core.config import ConfigError
from relci.core.errors import ErrorCode
from relci.output.console import Style
from relci.platform.ci import HaltFailed
from relci.release.codec import MalformedReference
from relci.services.assembler import TemplateReadError
from relci.services.changes import VcsQueryError
from relci.services.pipeline import WriteFailed
from relci.services.scope import MissingReleaseContext
from relci.services.template import DuplicateMarker, MarkerNotFound
from relci.services.validator import InvalidConfig

if TYPE_CHECKING:
    from relci.output.console import ConsoleProtocol

__all__ = ["CliError", "error_exit_code", "print_error"]

CliError = (
    ConfigError
    | MalformedReference
    | MissingReleaseContext
    | VcsQueryError
    | HaltFailed
    | TemplateReadError
    | MarkerNotFound
    | DuplicateMarker
    | InvalidConfig
    | WriteFailed
)


def print_error(error: CliError, console: ConsoleProtocol) -> None:
    """Print an error (and its hint, if any) to the console."""
    match error:
        case ConfigError(message=message, path=path):
            console.error(message)
            if path is not None:
                console.print(f"config: {path}", Style.HINT)
        case InvalidConfig(diagnostics=diagnostics):
            console.error(error.message)
            # Validator output is shown verbatim; it is what the operator must fix.
            if diagnostics:
                console.print(diagnostics, Style.ERROR)
        case _:
            console.error(error.message)
            if error.hint:
                console.print(f"hint: {error.hint}", Style.HINT)


def error_exit_code(error: CliError) -> int:
    """Get exit code for an error."""
    match error:
        case MissingReleaseContext():
            return int(ErrorCode.MISSING_RELEASE_CONTEXT)
        case MalformedReference() | ConfigError():
            return int(ErrorCode.USER_ERROR)
        case VcsQueryError():
            return int(ErrorCode.VCS_ERROR)
        case HaltFailed():
            return int(ErrorCode.ENV_ERROR)
        case TemplateReadError() | WriteFailed():
            return int(ErrorCode.IO_ERROR)
        case MarkerNotFound() | DuplicateMarker() | InvalidConfig():
            return int(ErrorCode.TEMPLATE_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
