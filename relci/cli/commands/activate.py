from __future__ import annotations

import typer

from relci.cli.commands._helpers import unwrap_or_exit
from relci.cli.context import build_context
from relci.services.scope import active_release_path


def activate_path() -> None:
    """Print the activate script path of the active release."""
    ctx = build_context()
    path = unwrap_or_exit(active_release_path(ctx.settings), ctx)
    typer.echo(path.activate_path)
