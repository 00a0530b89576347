"""Zone records of the preset and instrument bags."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import pairwise
from typing import Any, Sequence

from .chunks import SoundFontError, read_u16


@dataclass
class ZoneInfo:
    """Indices of a zone's generators and modulators, and their counts."""

    generator_index: int
    modulator_index: int
    generator_count: int = 0
    modulator_count: int = 0


@dataclass
class Zone:
    """A zone: the generators that belong to it."""

    generators: list[Any] = field(default_factory=list)


def read_zone_infos(stream, size: int) -> list[ZoneInfo]:
    """Read a bag chunk of ``size`` bytes; the last record is the terminator."""
    if size % 4 != 0:
        raise SoundFontError("the zone list is invalid")
    count = size // 4
    if count == 0:
        raise SoundFontError("the zone list is invalid")

    infos = [ZoneInfo(read_u16(stream), read_u16(stream)) for _ in range(count)]
    for current, following in pairwise(infos):
        current.generator_count = following.generator_index - current.generator_index
        current.modulator_count = following.modulator_index - current.modulator_index
    return infos


def create_zones(infos: Sequence[ZoneInfo], generators: Sequence[Any]) -> list[Zone]:
    """Build a zone for each record except the terminator."""
    if len(infos) <= 1:
        raise SoundFontError("no valid zone was found")

    zones = []
    for info in infos[:-1]:
        start = info.generator_index
        stop = start + info.generator_count
        if info.generator_count < 0 or stop > len(generators):
            raise SoundFontError("a zone refers to generators that do not exist")
        zones.append(Zone(list(generators[start:stop])))
    return zones