"""Regenerate the pipeline artifact: assemble, validate, write."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relci.core.config import Settings
from relci.core.result import Err, Ok, Result
from relci.git.repository import VcsProtocol
from relci.platform.files import atomic_write_text
from relci.services.assembler import AssembledConfig, AssemblyError, TemplateLayout, assemble
from relci.services.changes import VcsQueryError, query_changes
from relci.services.validator import InvalidConfig, ValidatorProtocol

__all__ = ["RegenerateError", "WriteFailed", "generate", "regenerate"]


@dataclass(frozen=True, slots=True)
class WriteFailed:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"cannot write {self.path}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return None


RegenerateError = VcsQueryError | AssemblyError | InvalidConfig | WriteFailed


def generate(
    settings: Settings,
    vcs: VcsProtocol,
    validator: ValidatorProtocol,
) -> Result[AssembledConfig, VcsQueryError | AssemblyError | InvalidConfig]:
    """Assemble and validate the config without touching the artifact."""
    changes = query_changes(vcs, settings.base_revision, settings.target_revision)
    if isinstance(changes, Err):
        return changes

    assembled = assemble(TemplateLayout.from_settings(settings), changes.value)
    if isinstance(assembled, Err):
        return assembled

    validated = validator.validate(assembled.value.text)
    if isinstance(validated, Err):
        return validated
    return assembled


def regenerate(
    settings: Settings,
    vcs: VcsProtocol,
    validator: ValidatorProtocol,
) -> Result[AssembledConfig, RegenerateError]:
    """Generate the config and overwrite the artifact with it.

    The artifact is replaced only after validation passes.
    """
    generated = generate(settings, vcs, validator)
    if isinstance(generated, Err):
        return generated

    output = settings.output_path
    try:
        atomic_write_text(output, generated.value.text)
    except OSError as e:
        return Err(WriteFailed(output, e.strerror or str(e)))
    return Ok(generated.value)
