"""Tests for relci.services.template."""

from __future__ import annotations

import pytest

from relci.core.result import Err, Ok
from relci.services.template import (
    DuplicateMarker,
    MarkerNotFound,
    MarkerTemplate,
    Slot,
    substitute,
)

TEXT = "head\n  ${A}\nmiddle\n${B}\ntail\n"


def _parse(text: str = TEXT) -> MarkerTemplate:
    result = MarkerTemplate.parse(text, ("A", "B"))
    assert isinstance(result, Ok), result
    return result.value


def test_parse_finds_marker_lines() -> None:
    template = _parse()
    assert template.slots == ("A", "B")
    assert template.nodes[1] == Slot("A")


def test_render_replaces_marker_lines_wholesale() -> None:
    rendered = _parse().render({"A": "a1\na2\n", "B": "b1\n"})
    assert rendered == "head\na1\na2\nmiddle\nb1\ntail\n"


def test_render_empty_content_drops_the_line() -> None:
    assert _parse().render({"A": "", "B": ""}) == "head\nmiddle\ntail\n"


def test_render_terminates_content_line() -> None:
    assert _parse().render({"A": "a", "B": "b"}) == "head\na\nmiddle\nb\ntail\n"


def test_inline_marker_is_not_a_marker_line() -> None:
    result = MarkerTemplate.parse("jobs: ${A}\n${B}\n", ("A", "B"), source="config.yml")
    assert isinstance(result, Err)
    assert result.error == MarkerNotFound(source="config.yml", marker="A")
    assert "${A}" in result.error.message


def test_duplicate_marker() -> None:
    result = MarkerTemplate.parse("${A}\n${B}\n${A}\n", ("A", "B"))
    assert isinstance(result, Err)
    assert isinstance(result.error, DuplicateMarker)
    assert result.error.lines == (1, 3)


def test_render_requires_every_slot() -> None:
    with pytest.raises(KeyError):
        _parse().render({"A": "x"})


def test_substitute_replaces_every_occurrence_only() -> None:
    text = "name: ${RELEASE}\nimage: ${RELEASE}\nenv: $HOME $$ ${OTHER}\n"
    assert substitute(text, "RELEASE", "dogwood.3-fun") == (
        "name: dogwood.3-fun\nimage: dogwood.3-fun\nenv: $HOME $$ ${OTHER}\n"
    )
