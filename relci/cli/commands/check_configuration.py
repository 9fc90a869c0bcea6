from __future__ import annotations

import typer

from relci.cli.commands._helpers import unwrap_or_exit
from relci.cli.context import build_context
from relci.core.errors import ErrorCode
from relci.output.console import Style
from relci.services.drift import check_drift


def check_configuration(
    validate: bool = typer.Option(
        True,
        "--validate/--no-validate",
        help="Validate the generated config with the CircleCI CLI container.",
    ),
) -> None:
    """Fail if the committed pipeline config is out of date."""
    ctx = build_context()
    report = unwrap_or_exit(check_drift(ctx.settings, ctx.vcs, ctx.validator(enabled=validate)), ctx)

    output = ctx.settings.paths.output
    if not report.is_clean:
        ctx.console.error(f"{output} is out of date with its templates")
        for path in report.differing:
            ctx.console.print(f"  {path}", Style.DIM)
        ctx.console.print(f"hint: run `relci update` and commit {output}", Style.HINT)
        raise typer.Exit(code=int(ErrorCode.DRIFT))

    ctx.console.success(f"{output} is up to date")
