from __future__ import annotations

import typer

from relci.cli.commands._helpers import unwrap_or_exit
from relci.cli.context import build_context
from relci.services.changes import query_changes


def get_changes(
    base: str | None = typer.Option(None, "--base", help="Baseline revision (default: master)"),
    target: str | None = typer.Option(None, "--target", help="Revision under test (default: HEAD)"),
) -> None:
    """List files changed since the baseline, one per line."""
    ctx = build_context()
    record = unwrap_or_exit(
        query_changes(
            ctx.vcs,
            base or ctx.settings.base_revision,
            target or ctx.settings.target_revision,
        ),
        ctx,
    )
    for path in record.paths:
        typer.echo(path)
