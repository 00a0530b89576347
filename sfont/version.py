"""SoundFont version numbers."""

from __future__ import annotations

from dataclasses import dataclass

from .chunks import read_i16


@dataclass(frozen=True)
class SoundFontVersion:
    """A major/minor version pair."""

    major: int = 0
    minor: int = 0


def read_version(stream) -> SoundFontVersion:
    """Read a version record: two little-endian signed 16-bit numbers."""
    major = read_i16(stream)
    minor = read_i16(stream)
    return SoundFontVersion(major, minor)