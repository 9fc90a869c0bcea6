"""Fakes for the external collaborators and a release repository fixture."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relci.core.config import Settings
from relci.core.result import Err, Ok, Result
from relci.git.repository import GitError
from relci.platform.ci import HaltFailed
from relci.services.validator import InvalidConfig

MASTER_TEMPLATE = """\
version: 2.1
workflows:
  build:
    jobs:
${WORKFLOW_JOBS_LIST}
jobs:
${JOBS_LIST}
"""

TEMPLATES = {
    "config.yml": MASTER_TEMPLATE,
    "workflow-changed.yml": "      - build-${RELEASE}\n",
    "workflow-unchanged.yml": "      - skip-${RELEASE}\n",
    "job-changed.yml": "  build-${RELEASE}:\n    steps: [checkout, build]\n",
    "job-unchanged.yml": "  skip-${RELEASE}:\n    steps: [noop]\n",
}


def _no_paths() -> list[str]:
    return []


@dataclass
class FakeVcs:
    changed: list[str] = field(default_factory=_no_paths)
    dirty: list[str] = field(default_factory=_no_paths)
    fail_changed: bool = False
    fail_diff: bool = False
    queries: list[tuple[str, str]] = field(default_factory=list)
    scopes: list[Path] = field(default_factory=list)

    def changed_paths(self, from_revision: str, to_revision: str) -> Result[list[str], GitError]:
        self.queries.append((from_revision, to_revision))
        if self.fail_changed:
            return Err(GitError(command="diff", message=f"unknown revision {from_revision}"))
        return Ok(list(self.changed))

    def diff_names_only(self, scope: Path) -> Result[list[str], GitError]:
        self.scopes.append(scope)
        if self.fail_diff:
            return Err(GitError(command="diff", message="not a git repository"))
        return Ok(list(self.dirty))


@dataclass
class FakeHalter:
    calls: int = 0
    fail: bool = False

    def halt(self) -> Result[None, HaltFailed]:
        self.calls += 1
        if self.fail:
            return Err(HaltFailed(message="circleci-agent step halt failed"))
        return Ok(None)


@dataclass
class FakeValidator:
    diagnostics: str | None = None
    seen: list[str] = field(default_factory=list)

    def validate(self, text: str) -> Result[None, InvalidConfig]:
        self.seen.append(text)
        if self.diagnostics is not None:
            return Err(InvalidConfig(diagnostics=self.diagnostics))
        return Ok(None)


@pytest.fixture
def fake_vcs() -> FakeVcs:
    return FakeVcs()


@pytest.fixture
def fake_halter() -> FakeHalter:
    return FakeHalter()


@pytest.fixture
def fake_validator() -> FakeValidator:
    return FakeValidator()


@pytest.fixture
def release_repo(tmp_path: Path) -> Callable[..., Settings]:
    """Build a repository with templates and the given release directories."""

    def make(*releases: str, templates: dict[str, str] | None = None) -> Settings:
        template_dir = tmp_path / ".circleci" / "templates"
        template_dir.mkdir(parents=True, exist_ok=True)
        for name, text in (templates if templates is not None else TEMPLATES).items():
            (template_dir / name).write_text(text, encoding="utf-8")
        for release in releases:
            release_dir = tmp_path / "releases" / release
            (release_dir / "config").mkdir(parents=True, exist_ok=True)
            (release_dir / "activate").write_text("#!/bin/sh\n", encoding="utf-8")
        return Settings(repo_root=tmp_path)

    return make
