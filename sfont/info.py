"""The INFO list of a SoundFont."""

from __future__ import annotations

from dataclasses import dataclass, field

from .chunks import SoundFontError, iter_subchunks, read_fixed_length_string
from .version import SoundFontVersion, read_version

_VERSION_FIELDS = {"ifil": "version", "iver": "rom_version"}

_STRING_FIELDS = {
    "isng": "target_sound_engine",
    "INAM": "bank_name",
    "irom": "rom_name",
    "ICRD": "creation_date",
    "IENG": "author",
    "IPRD": "target_product",
    "ICOP": "copyright",
    "ICMT": "comments",
    "ISFT": "tools",
}


@dataclass(frozen=True)
class SoundFontInfo:
    """Descriptive information about a SoundFont."""

    version: SoundFontVersion = field(default_factory=SoundFontVersion)
    target_sound_engine: str = ""
    bank_name: str = ""
    rom_name: str = ""
    rom_version: SoundFontVersion = field(default_factory=SoundFontVersion)
    creation_date: str = ""
    author: str = ""
    target_product: str = ""
    copyright: str = ""
    comments: str = ""
    tools: str = ""


def read_info(stream) -> SoundFontInfo:
    """Read the INFO list chunk; absent entries keep their defaults."""
    values: dict[str, object] = {}
    for chunk_id, size, reader in iter_subchunks(stream, "INFO"):
        if chunk_id in _VERSION_FIELDS:
            values[_VERSION_FIELDS[chunk_id]] = read_version(reader)
        elif chunk_id in _STRING_FIELDS:
            values[_STRING_FIELDS[chunk_id]] = read_fixed_length_string(reader, size)
        else:
            raise SoundFontError(f"the INFO list contains an unknown ID '{chunk_id}'")
    return SoundFontInfo(**values)