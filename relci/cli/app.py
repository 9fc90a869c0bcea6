from __future__ import annotations

import os
from pathlib import Path

import click
import typer
from typer.core import TyperGroup

from relci import __version__
from relci.cli.commands.activate import activate_path
from relci.cli.commands.changes import get_changes
from relci.cli.commands.check_configuration import check_configuration
from relci.cli.commands.checkpoint import checkpoint
from relci.cli.commands.update import update
from relci.cli.context import ENV_REPO_ROOT
from relci.core.errors import ErrorCode


class OperationGroup(TyperGroup):
    """Unknown operations print usage and exit successfully."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        name = args[0] if args else ""
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            typer.echo(f"unknown operation: {name}", err=True)
            typer.echo(ctx.get_help())
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=OperationGroup,
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
)


# Operation names are used verbatim in CI config, hence the underscores.
app.command("activate_path")(activate_path)
app.command("checkpoint")(checkpoint)
app.command("get_changes")(get_changes)
app.command("update")(update)
app.command("check_configuration")(check_configuration)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (default: git toplevel of the current directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[ENV_REPO_ROOT] = str(root)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()
