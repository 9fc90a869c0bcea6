from __future__ import annotations

import typer

from relci.cli.commands._helpers import unwrap_or_exit
from relci.cli.context import build_context
from relci.output.console import Style
from relci.services.pipeline import regenerate


def update(
    validate: bool = typer.Option(
        True,
        "--validate/--no-validate",
        help="Validate the generated config with the CircleCI CLI container.",
    ),
) -> None:
    """Regenerate the pipeline config from the release templates."""
    ctx = build_context()
    config = unwrap_or_exit(regenerate(ctx.settings, ctx.vcs, ctx.validator(enabled=validate)), ctx)

    output = ctx.settings.paths.output
    ctx.console.success(
        f"wrote {output} ({len(config.releases)} releases, {len(config.changed)} changed)"
    )
    for release in config.changed:
        ctx.console.print(f"  changed: {release.label}", Style.DIM)
