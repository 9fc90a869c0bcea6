"""Release references and release paths.

A release reference is the compact name CI uses for one deployable flavor:

    <name>[.<number>][-<flavor>][-<version>]

``name`` and ``flavor`` are lowercase letters, ``number`` is digits and the
optional ``version`` (digits and dots, e.g. ``1.0.3``) is a tag suffix that
never influences the path. Each reference addresses a directory
``releases/<name>/<number>/<flavor>``; a missing flavor means ``bare``.

    >>> decode("dogwood.3-fun").unwrap().as_posix()
    'releases/dogwood/3/fun'
    >>> decode("hawthorn.1-1.0.3").unwrap().as_posix()
    'releases/hawthorn/1/bare'
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass

from relci.core.result import Err, Ok, Result

__all__ = [
    "DEFAULT_FLAVOR",
    "RELEASES_DIR",
    "MalformedReference",
    "ReleasePath",
    "ReleaseReference",
    "decode",
    "encode",
    "parse_reference",
]

DEFAULT_FLAVOR = "bare"
RELEASES_DIR = "releases"
ACTIVATE_FILE = "activate"

_LETTERS = frozenset(string.ascii_lowercase)
_DIGITS = frozenset(string.digits)
_VERSION_CHARS = _DIGITS | {"."}


@dataclass(frozen=True, slots=True)
class MalformedReference:
    """The reference is not in the release reference grammar.

    Attributes:
        reference: The rejected input.
        position: Offset of the first character that could not be consumed.
    """

    reference: str
    position: int

    @property
    def message(self) -> str:
        return f"malformed release reference {self.reference!r} (offset {self.position})"

    @property
    def hint(self) -> str:
        return "expected <name>[.<number>][-<flavor>][-<version>] using lowercase letters"


@dataclass(frozen=True, slots=True)
class ReleasePath:
    """Location of a release flavor under the releases directory.

    ``number`` is the empty string when the reference had none; it is not
    defaulted the way ``flavor`` is.
    """

    name: str
    number: str
    flavor: str = DEFAULT_FLAVOR

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(s for s in (RELEASES_DIR, self.name, self.number, self.flavor) if s)

    def as_posix(self) -> str:
        return "/".join(self.segments)

    def __str__(self) -> str:
        return self.as_posix()

    @property
    def activate_path(self) -> str:
        return f"{self.as_posix()}/{ACTIVATE_FILE}"

    @property
    def label(self) -> str:
        """Dotted-dashed label used for job and workflow names."""
        return f"{self.name}.{self.number}-{self.flavor}"

    def prefix_pattern(self) -> str:
        """Regex matching any repository path inside this release directory."""
        return "^" + re.escape(self.as_posix() + "/")


@dataclass(frozen=True, slots=True)
class ReleaseReference:
    """A parsed reference. Absent parts are None, never empty strings."""

    name: str
    number: str | None = None
    flavor: str | None = None
    version: str | None = None

    def to_path(self) -> ReleasePath:
        return ReleasePath(
            name=self.name,
            number=self.number or "",
            flavor=self.flavor or DEFAULT_FLAVOR,
        )


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def accept(self, char: str) -> bool:
        if self.peek() == char:
            self.pos += 1
            return True
        return False

    def take(self, allowed: frozenset[str]) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in allowed:
            self.pos += 1
        return self.text[start : self.pos]

    @property
    def done(self) -> bool:
        return self.pos == len(self.text)


def parse_reference(reference: str) -> Result[ReleaseReference, MalformedReference]:
    """Parse a reference into its parts in a single left-to-right pass.

    After the first ``-``, a digit or dot starts the version suffix; anything
    else is a flavor, which may itself be followed by ``-<version>``.
    """
    scanner = _Scanner(reference)

    name = scanner.take(_LETTERS)
    number: str | None = None
    flavor: str | None = None
    version: str | None = None

    if scanner.accept("."):
        number = scanner.take(_DIGITS) or None

    if scanner.accept("-"):
        if scanner.peek() in _VERSION_CHARS:
            version = scanner.take(_VERSION_CHARS)
        else:
            flavor = scanner.take(_LETTERS) or None
            if scanner.accept("-"):
                version = scanner.take(_VERSION_CHARS)
                if not version:
                    return Err(MalformedReference(reference, scanner.pos))

    if not scanner.done:
        return Err(MalformedReference(reference, scanner.pos))

    return Ok(ReleaseReference(name=name, number=number, flavor=flavor, version=version))


def decode(reference: str) -> Result[ReleasePath, MalformedReference]:
    """Map a release reference to its release path."""
    return parse_reference(reference).map(ReleaseReference.to_path)


def encode(path: ReleasePath) -> str:
    """Format a release path as its shortest reference.

    The empty number and the default flavor are omitted, so
    ``decode(encode(p)) == p`` for every decoded path.
    """
    out = path.name
    if path.number:
        out += f".{path.number}"
    if path.flavor and path.flavor != DEFAULT_FLAVOR:
        out += f"-{path.flavor}"
    return out
