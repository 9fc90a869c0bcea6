"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from relci.core.result import Err, Result
from relci.output.errors import CliError, error_exit_code, print_error

if TYPE_CHECKING:
    from relci.cli.context import CLIContext


T = TypeVar("T")


def unwrap_or_exit(result: Result[T, CliError], ctx: CLIContext) -> T:
    """Return the value of an Ok result, or report the error and exit.

    Replaces the pattern repeated by every command:
        match result:
            case Err(e):
                print_error(e, ctx.console)
                raise typer.Exit(code=error_exit_code(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))
    return result.value
