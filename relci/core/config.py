"""Typed settings for every relci operation.

Settings are assembled once at the CLI boundary from three layers, later
layers winning: built-in defaults, an optional ``relci.toml`` at the
repository root, and the CI environment. Services receive the resulting
``Settings`` object and never read the environment themselves.

Example relci.toml:

    [revisions]
    base = "main"

    [paths]
    releases = "releases"
    templates = ".circleci/templates"
    output = ".circleci/config.yml"

    [validator]
    enabled = true
    image = "circleci/circleci-cli:alpine"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PathsConfig",
    "Settings",
    "ValidatorConfig",
    "load_settings",
    # Environment variable names
    "ENV_BASE_REVISION",
    "ENV_JOB_NAME",
    "ENV_RELEASE_TAG",
    "ENV_TARGET_REVISION",
]

CONFIG_FILENAME = "relci.toml"

# CircleCI sets these for tag-triggered builds and for every job respectively.
ENV_RELEASE_TAG = "CIRCLE_TAG"
ENV_JOB_NAME = "CIRCLE_JOB"
ENV_BASE_REVISION = "RELCI_BASE_REVISION"
ENV_TARGET_REVISION = "RELCI_TARGET_REVISION"

DEFAULT_BASE_REVISION = "master"
DEFAULT_TARGET_REVISION = "HEAD"
DEFAULT_VALIDATOR_IMAGE = "circleci/circleci-cli:alpine"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when relci.toml cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Repository-relative locations of release directories and templates."""

    releases: str = "releases"
    templates: str = ".circleci/templates"
    output: str = ".circleci/config.yml"
    master_template: str = "config.yml"
    workflow_changed: str = "workflow-changed.yml"
    workflow_unchanged: str = "workflow-unchanged.yml"
    job_changed: str = "job-changed.yml"
    job_unchanged: str = "job-unchanged.yml"


@dataclass(frozen=True, slots=True)
class ValidatorConfig:
    """Container-based config validation."""

    enabled: bool = True
    image: str = DEFAULT_VALIDATOR_IMAGE


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything an operation needs, resolved up front."""

    repo_root: Path
    base_revision: str = DEFAULT_BASE_REVISION
    target_revision: str = DEFAULT_TARGET_REVISION
    release_tag: str | None = None
    job_name: str | None = None
    paths: PathsConfig = field(default_factory=PathsConfig)
    validator: ValidatorConfig = field(default_factory=ValidatorConfig)

    @property
    def active_reference(self) -> str | None:
        """The release reference for this job; the tag wins over the job name."""
        return self.release_tag or self.job_name

    @property
    def releases_root(self) -> Path:
        return self.repo_root / self.paths.releases

    @property
    def templates_dir(self) -> Path:
        return self.repo_root / self.paths.templates

    @property
    def output_path(self) -> Path:
        return self.repo_root / self.paths.output

    @classmethod
    def from_dict(cls, repo_root: Path, data: Mapping[str, object]) -> Settings:
        """Create Settings from a mapping (parsed TOML)."""
        revisions: StrDict = get_table(data, "revisions") or {}
        paths: StrDict = get_table(data, "paths") or {}
        validator: StrDict = get_table(data, "validator") or {}
        defaults = PathsConfig()

        enabled = get_bool(validator, "enabled")
        return cls(
            repo_root=repo_root,
            base_revision=get_str(revisions, "base") or DEFAULT_BASE_REVISION,
            target_revision=get_str(revisions, "target") or DEFAULT_TARGET_REVISION,
            paths=PathsConfig(
                releases=get_str(paths, "releases") or defaults.releases,
                templates=get_str(paths, "templates") or defaults.templates,
                output=get_str(paths, "output") or defaults.output,
                master_template=get_str(paths, "master_template") or defaults.master_template,
                workflow_changed=get_str(paths, "workflow_changed") or defaults.workflow_changed,
                workflow_unchanged=get_str(paths, "workflow_unchanged")
                or defaults.workflow_unchanged,
                job_changed=get_str(paths, "job_changed") or defaults.job_changed,
                job_unchanged=get_str(paths, "job_unchanged") or defaults.job_unchanged,
            ),
            validator=ValidatorConfig(
                enabled=True if enabled is None else enabled,
                image=get_str(validator, "image") or DEFAULT_VALIDATOR_IMAGE,
            ),
        )

    def with_environment(self, environ: Mapping[str, str]) -> Settings:
        """Overlay CI environment variables; empty values count as unset."""
        return replace(
            self,
            release_tag=_env(environ, ENV_RELEASE_TAG) or self.release_tag,
            job_name=_env(environ, ENV_JOB_NAME) or self.job_name,
            base_revision=_env(environ, ENV_BASE_REVISION) or self.base_revision,
            target_revision=_env(environ, ENV_TARGET_REVISION) or self.target_revision,
        )


def _env(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(key, "").strip()
    return value or None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_settings(repo_root: Path, environ: Mapping[str, str]) -> Result[Settings, ConfigError]:
    """Resolve settings for a repository.

    Args:
        repo_root: Repository root; relci.toml is looked up here.
        environ: Process environment (usually ``os.environ``).

    Returns:
        Ok(Settings) on success, Err(ConfigError) if relci.toml is invalid.
    """
    config_path = repo_root / CONFIG_FILENAME
    data: StrDict = {}
    if config_path.is_file():
        parsed = _parse_toml(config_path)
        if isinstance(parsed, Err):
            return parsed
        data = parsed.value

    try:
        settings = Settings.from_dict(repo_root, data)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=config_path))
    return Ok(settings.with_environment(environ))
