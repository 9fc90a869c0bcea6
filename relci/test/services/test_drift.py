"""Tests for relci.services.pipeline and relci.services.drift."""

from __future__ import annotations

from relci.core.result import Err, Ok
from relci.services.changes import VcsQueryError
from relci.services.drift import DriftStatus, check_drift
from relci.services.pipeline import generate, regenerate
from relci.services.validator import InvalidConfig


class TestRegenerate:
    def test_writes_validated_artifact(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")

        result = regenerate(settings, fake_vcs, fake_validator)

        assert isinstance(result, Ok)
        written = settings.output_path.read_text(encoding="utf-8")
        assert written == result.value.text
        assert fake_validator.seen == [written]

    def test_overwrites_previous_artifact(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")
        settings.output_path.write_text("stale: true\n", encoding="utf-8")

        regenerate(settings, fake_vcs, fake_validator)

        assert "stale" not in settings.output_path.read_text(encoding="utf-8")

    def test_invalid_config_is_not_written(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")
        fake_validator.diagnostics = "Error: config is invalid"

        result = regenerate(settings, fake_vcs, fake_validator)

        assert isinstance(result, Err)
        assert result.error == InvalidConfig(diagnostics="Error: config is invalid")
        assert not settings.output_path.exists()

    def test_generate_uses_change_record(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare", "beta/2/fun")
        fake_vcs.changed = ["releases/alpha/1/bare/requirements.txt"]

        result = generate(settings, fake_vcs, fake_validator)

        assert isinstance(result, Ok)
        assert [r.label for r in result.value.changed] == ["alpha.1-bare"]
        assert not settings.output_path.exists()


class TestCheckDrift:
    def test_clean(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")

        result = check_drift(settings, fake_vcs, fake_validator)

        assert isinstance(result, Ok)
        assert result.value.status == DriftStatus.CLEAN
        assert result.value.is_clean
        assert fake_vcs.scopes == [settings.output_path.parent]

    def test_drifted(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")
        fake_vcs.dirty = [".circleci/config.yml"]

        result = check_drift(settings, fake_vcs, fake_validator)

        assert isinstance(result, Ok)
        assert result.value.status == DriftStatus.DRIFTED
        assert result.value.differing == (".circleci/config.yml",)

    def test_rerun_is_stable(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare", "beta/2/fun")

        check_drift(settings, fake_vcs, fake_validator)
        first = settings.output_path.read_text(encoding="utf-8")
        check_drift(settings, fake_vcs, fake_validator)

        assert settings.output_path.read_text(encoding="utf-8") == first

    def test_diff_failure(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")
        fake_vcs.fail_diff = True

        result = check_drift(settings, fake_vcs, fake_validator)

        assert isinstance(result, Err)
        assert isinstance(result.error, VcsQueryError)

    def test_invalid_config_stops_check(self, release_repo, fake_vcs, fake_validator) -> None:
        settings = release_repo("alpha/1/bare")
        fake_validator.diagnostics = "bad"

        result = check_drift(settings, fake_vcs, fake_validator)

        assert isinstance(result, Err)
        assert fake_vcs.scopes == []
