"""Release references and the on-disk release layout."""

from __future__ import annotations

from relci.release.codec import (
    DEFAULT_FLAVOR,
    RELEASES_DIR,
    MalformedReference,
    ReleasePath,
    ReleaseReference,
    decode,
    encode,
    parse_reference,
)

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
