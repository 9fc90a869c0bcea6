"""Line-oriented templates with marker slots.

A master template is plain text where some lines consist solely of a marker
such as ``${JOBS_LIST}``. Parsing turns the text into an ordered list of
literal lines and slots, and checks that every required marker occurs
exactly once. Rendering replaces each slot line wholesale with its content,
so a parsed template can never silently drop a section.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from relci.core.result import Err, Ok, Result

__all__ = [
    "DuplicateMarker",
    "MarkerNotFound",
    "MarkerTemplate",
    "Slot",
    "marker_token",
    "substitute",
]


@dataclass(frozen=True, slots=True)
class MarkerNotFound:
    source: str
    marker: str

    @property
    def message(self) -> str:
        return f"{self.source}: marker line {marker_token(self.marker)} not found"

    @property
    def hint(self) -> str:
        return f"add a line containing only {marker_token(self.marker)}"


@dataclass(frozen=True, slots=True)
class DuplicateMarker:
    source: str
    marker: str
    lines: tuple[int, ...]

    @property
    def message(self) -> str:
        where = ", ".join(str(n) for n in self.lines)
        return f"{self.source}: marker {marker_token(self.marker)} appears on lines {where}"

    @property
    def hint(self) -> str:
        return "each marker must appear on exactly one line"


@dataclass(frozen=True, slots=True)
class Slot:
    """A marker line, replaced by content at render time."""

    name: str


def marker_token(name: str) -> str:
    return "${" + name + "}"


def substitute(text: str, placeholder: str, value: str) -> str:
    """Replace every ``${placeholder}`` occurrence; other ``$`` text is left alone."""
    return text.replace(marker_token(placeholder), value)


@dataclass(frozen=True, slots=True)
class MarkerTemplate:
    nodes: tuple[str | Slot, ...]

    @classmethod
    def parse(
        cls,
        text: str,
        markers: tuple[str, ...],
        *,
        source: str = "<template>",
    ) -> Result[MarkerTemplate, MarkerNotFound | DuplicateMarker]:
        tokens = {marker_token(m): m for m in markers}
        seen: dict[str, list[int]] = {m: [] for m in markers}

        nodes: list[str | Slot] = []
        for lineno, line in enumerate(text.splitlines(keepends=True), start=1):
            name = tokens.get(line.strip())
            if name is None:
                nodes.append(line)
                continue
            seen[name].append(lineno)
            nodes.append(Slot(name))

        for name in markers:
            if not seen[name]:
                return Err(MarkerNotFound(source=source, marker=name))
            if len(seen[name]) > 1:
                return Err(DuplicateMarker(source=source, marker=name, lines=tuple(seen[name])))

        return Ok(cls(nodes=tuple(nodes)))

    @property
    def slots(self) -> tuple[str, ...]:
        return tuple(n.name for n in self.nodes if isinstance(n, Slot))

    def render(self, fills: Mapping[str, str]) -> str:
        """Render with every slot filled.

        Raises:
            KeyError: If ``fills`` lacks content for one of the slots.
        """
        parts: list[str] = []
        for node in self.nodes:
            if isinstance(node, Slot):
                content = fills[node.name]
                if content and not content.endswith("\n"):
                    content += "\n"
                parts.append(content)
            else:
                parts.append(node)
        return "".join(parts)
