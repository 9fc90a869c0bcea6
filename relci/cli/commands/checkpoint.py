from __future__ import annotations

from relci.cli.commands._helpers import unwrap_or_exit
from relci.cli.context import build_context
from relci.output.console import Style
from relci.services.scope import ScopeDecision, evaluate_scope

_MAX_EVIDENCE = 10


def checkpoint() -> None:
    """Halt this job unless the change touches the active release."""
    ctx = build_context()
    report = unwrap_or_exit(evaluate_scope(ctx.settings, ctx.vcs, ctx.halter), ctx)

    changes = report.changes
    ctx.console.print(
        f"{len(changes)} changed file(s) between {changes.from_revision} and {changes.to_revision}",
        Style.DIM,
    )

    match report.decision:
        case ScopeDecision.GLOBAL:
            ctx.console.info(f"{report.reference}: changes outside releases/, every release runs")
        case ScopeDecision.IN_SCOPE:
            ctx.console.success(f"{report.reference}: {report.path} changed, job continues")
        case ScopeDecision.OUT_OF_SCOPE:
            ctx.console.info(f"{report.reference}: nothing changed under {report.path}, job halted")

    for path in report.evidence[:_MAX_EVIDENCE]:
        ctx.console.print(f"  {path}", Style.DIM)
    if len(report.evidence) > _MAX_EVIDENCE:
        ctx.console.print(f"  ... and {len(report.evidence) - _MAX_EVIDENCE} more", Style.DIM)
