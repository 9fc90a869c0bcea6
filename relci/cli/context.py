from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relci.core.config import Settings, load_settings
from relci.core.errors import ErrorCode
from relci.core.result import Err
from relci.git.repository import Repository, VcsProtocol, find_repo_root
from relci.output.console import ConsoleProtocol, RichConsole
from relci.platform.ci import CircleCiAgent, JobHalterProtocol
from relci.services.validator import DockerValidator, NoopValidator, ValidatorProtocol

ENV_REPO_ROOT = "RELCI_REPO_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    vcs: VcsProtocol
    halter: JobHalterProtocol
    console: ConsoleProtocol

    def validator(self, *, enabled: bool = True) -> ValidatorProtocol:
        if not (enabled and self.settings.validator.enabled):
            return NoopValidator()
        return DockerValidator(self.settings.validator, cwd=self.settings.repo_root)


def resolve_repo_root() -> Path:
    env = os.environ.get(ENV_REPO_ROOT)
    if env:
        return Path(env)
    cwd = Path.cwd()
    return find_repo_root(cwd) or cwd


def build_context() -> CLIContext:
    console = RichConsole()
    root = resolve_repo_root()

    settings_result = load_settings(root, os.environ)
    if isinstance(settings_result, Err):
        console.error(settings_result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    settings = settings_result.value
    return CLIContext(
        settings=settings,
        vcs=Repository(settings.repo_root),
        halter=CircleCiAgent(cwd=settings.repo_root),
        console=console,
    )
