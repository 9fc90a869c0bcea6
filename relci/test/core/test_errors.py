"""Tests for relci.core.errors and relci.output.errors."""

from __future__ import annotations

from pathlib import Path

import pytest

from relci.core.config import ConfigError
from relci.core.errors import ErrorCode
from relci.output.console import MockConsole, RichConsole, Style
from relci.output.errors import error_exit_code, print_error
from relci.platform.ci import HaltFailed
from relci.release.codec import MalformedReference
from relci.services.assembler import TemplateReadError
from relci.services.changes import VcsQueryError
from relci.services.pipeline import WriteFailed
from relci.services.scope import MissingReleaseContext
from relci.services.template import DuplicateMarker, MarkerNotFound
from relci.services.validator import InvalidConfig


def test_error_code_values_are_stable() -> None:
    assert ErrorCode.OK == 0
    assert ErrorCode.MISSING_RELEASE_CONTEXT == 20
    assert str(ErrorCode.MISSING_RELEASE_CONTEXT) == "missing release context"
    assert ErrorCode.OK.is_success


def test_exit_codes() -> None:
    assert error_exit_code(MissingReleaseContext()) == 20
    assert error_exit_code(MalformedReference("X", 0)) == ErrorCode.USER_ERROR
    assert error_exit_code(ConfigError("bad")) == ErrorCode.USER_ERROR
    assert error_exit_code(VcsQueryError("master", "HEAD", "")) == ErrorCode.VCS_ERROR
    assert error_exit_code(HaltFailed("no agent")) == ErrorCode.ENV_ERROR
    assert error_exit_code(TemplateReadError(Path("t.yml"), "missing")) == ErrorCode.IO_ERROR
    assert error_exit_code(WriteFailed(Path("c.yml"), "read-only")) == ErrorCode.IO_ERROR
    assert error_exit_code(MarkerNotFound("c.yml", "JOBS_LIST")) == ErrorCode.TEMPLATE_ERROR
    assert error_exit_code(DuplicateMarker("c.yml", "JOBS_LIST", (1, 2))) == ErrorCode.TEMPLATE_ERROR
    assert error_exit_code(InvalidConfig("bad")) == ErrorCode.TEMPLATE_ERROR


def test_print_error_with_hint() -> None:
    console = MockConsole()

    print_error(MissingReleaseContext(), console)

    assert console.messages[0].startswith("error: no active release")
    assert console.messages[1].startswith("hint: ")
    assert console.outputs[1].style == Style.HINT


def test_print_invalid_config_shows_diagnostics_verbatim() -> None:
    console = MockConsole()

    print_error(InvalidConfig("Error: line 3\n  unexpected key"), console)

    assert console.has_error()
    assert "Error: line 3\n  unexpected key" in console.messages


def test_error_and_hint_stay_off_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    print_error(MissingReleaseContext(), RichConsole())

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "no active release" in captured.err
    assert "hint: " in captured.err
