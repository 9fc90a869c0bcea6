"""Generate the CI pipeline from per-release templates.

Every release flavor directory (``releases/<name>/<number>/<flavor>``) gets
one workflow fragment and one job fragment. Releases touched by the current
change use the "changed" templates (full build); the rest use the
"unchanged" ones, which keeps the generated pipeline small. Fragments are
spliced into the master template at its marker lines:

    ${WORKFLOW_JOBS_LIST}   <- all workflow fragments, in release order
    ${JOBS_LIST}            <- all job fragments, in release order

Release order is the sorted relative directory path, so the output is
byte-identical for identical inputs; the drift check relies on that.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relci.core.config import Settings
from relci.core.result import Err, Ok, Result
from relci.release.codec import ReleasePath
from relci.services.changes import ChangeRecord
from relci.services.template import (
    DuplicateMarker,
    MarkerNotFound,
    MarkerTemplate,
    substitute,
)

__all__ = [
    "AssembledConfig",
    "AssemblyError",
    "RelevancePattern",
    "TemplateLayout",
    "TemplatePair",
    "TemplateReadError",
    "assemble",
    "discover_releases",
    "generated_banner",
    "is_release_changed",
    "release_patterns",
]

WORKFLOW_MARKER = "WORKFLOW_JOBS_LIST"
JOBS_MARKER = "JOBS_LIST"
RELEASE_PLACEHOLDER = "RELEASE"


@dataclass(frozen=True, slots=True)
class TemplateReadError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"cannot read template {self.path}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return None


AssemblyError = TemplateReadError | MarkerNotFound | DuplicateMarker


@dataclass(frozen=True, slots=True)
class TemplateLayout:
    """Where the assembler reads from. Paths are absolute."""

    repo_root: Path
    releases_root: Path
    master: Path
    workflow_changed: Path
    workflow_unchanged: Path
    job_changed: Path
    job_unchanged: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> TemplateLayout:
        templates = settings.templates_dir
        paths = settings.paths
        return cls(
            repo_root=settings.repo_root,
            releases_root=settings.releases_root,
            master=templates / paths.master_template,
            workflow_changed=templates / paths.workflow_changed,
            workflow_unchanged=templates / paths.workflow_unchanged,
            job_changed=templates / paths.job_changed,
            job_unchanged=templates / paths.job_unchanged,
        )

    def display(self, path: Path) -> str:
        try:
            return path.relative_to(self.repo_root).as_posix()
        except ValueError:
            return path.as_posix()


@dataclass(frozen=True, slots=True)
class TemplatePair:
    workflow: str
    job: str


@dataclass(frozen=True, slots=True)
class RelevancePattern:
    """One independent reason to treat a release as changed."""

    name: str
    pattern: str


@dataclass(frozen=True, slots=True)
class AssembledConfig:
    text: str
    releases: tuple[ReleasePath, ...]
    changed: tuple[ReleasePath, ...]


def discover_releases(releases_root: Path) -> tuple[ReleasePath, ...]:
    """Directories exactly three levels below ``releases_root``, sorted by relative path."""
    if not releases_root.is_dir():
        return ()
    relative = sorted(
        p.relative_to(releases_root).as_posix()
        for p in releases_root.glob("*/*/*")
        if p.is_dir()
    )
    releases: list[ReleasePath] = []
    for rel in relative:
        name, number, flavor = rel.split("/")
        releases.append(ReleasePath(name=name, number=number, flavor=flavor))
    return tuple(releases)


def release_patterns(release: ReleasePath) -> tuple[RelevancePattern, ...]:
    prefix = release.prefix_pattern()
    return (
        RelevancePattern("docker", r"^docker/"),
        RelevancePattern("config", prefix + r"config/"),
        RelevancePattern("activate", prefix + r"activate$"),
        RelevancePattern("dockerfile", prefix + r"Dockerfile$"),
        RelevancePattern("requirements", prefix + r"requirements\.txt$"),
        RelevancePattern("entrypoint", prefix + r"entrypoint\.sh$"),
    )


def is_release_changed(release: ReleasePath, changes: ChangeRecord) -> bool:
    return any(changes.contains(p.pattern) for p in release_patterns(release))


def generated_banner(source: str) -> str:
    return (
        "# ---------------------------------------------------------------------\n"
        "# GENERATED FILE - DO NOT EDIT.\n"
        f"# Edit {source} or the release templates next to it,\n"
        "# then run `relci update` to regenerate this file.\n"
        "# ---------------------------------------------------------------------\n"
        "\n"
    )


def _read(path: Path) -> Result[str, TemplateReadError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(TemplateReadError(path, "file not found"))
    except UnicodeDecodeError as e:
        return Err(TemplateReadError(path, f"not UTF-8 text ({e.reason})"))
    except OSError as e:
        return Err(TemplateReadError(path, e.strerror or str(e)))


def _read_pair(workflow: Path, job: Path) -> Result[TemplatePair, TemplateReadError]:
    workflow_text = _read(workflow)
    if isinstance(workflow_text, Err):
        return workflow_text
    job_text = _read(job)
    if isinstance(job_text, Err):
        return job_text
    return Ok(TemplatePair(workflow=workflow_text.value, job=job_text.value))


def assemble(layout: TemplateLayout, changes: ChangeRecord) -> Result[AssembledConfig, AssemblyError]:
    """Build the pipeline configuration text.

    All templates are read and the master is parsed before any release is
    processed, so a missing file or marker fails the run even when the
    releases directory is empty.
    """
    changed_pair = _read_pair(layout.workflow_changed, layout.job_changed)
    if isinstance(changed_pair, Err):
        return changed_pair
    unchanged_pair = _read_pair(layout.workflow_unchanged, layout.job_unchanged)
    if isinstance(unchanged_pair, Err):
        return unchanged_pair

    master_text = _read(layout.master)
    if isinstance(master_text, Err):
        return master_text
    source = layout.display(layout.master)
    master = MarkerTemplate.parse(
        master_text.value,
        (WORKFLOW_MARKER, JOBS_MARKER),
        source=source,
    )
    if isinstance(master, Err):
        return master

    releases = discover_releases(layout.releases_root)
    workflows: list[str] = []
    jobs: list[str] = []
    changed: list[ReleasePath] = []
    for release in releases:
        if is_release_changed(release, changes):
            pair = changed_pair.value
            changed.append(release)
        else:
            pair = unchanged_pair.value
        workflows.append(substitute(pair.workflow, RELEASE_PLACEHOLDER, release.label))
        jobs.append(substitute(pair.job, RELEASE_PLACEHOLDER, release.label))

    body = master.value.render({WORKFLOW_MARKER: "".join(workflows), JOBS_MARKER: "".join(jobs)})
    return Ok(
        AssembledConfig(
            text=generated_banner(source) + body,
            releases=releases,
            changed=tuple(changed),
        )
    )
