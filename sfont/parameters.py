"""The preset, instrument and sample parameters (pdta list) of a SoundFont."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .chunks import SoundFontError, discard_data, iter_subchunks
from .zones import Zone, create_zones, read_zone_infos

ChunkReader = Callable[[Any, int], list]


@dataclass(frozen=True)
class ParameterCodec:
    """Readers and builders for the record types held in the pdta list.

    Each ``read_*`` callable takes ``(stream, size)`` and must consume exactly
    ``size`` bytes. The ``create_*`` callables assemble the final objects.
    """

    read_preset_infos: ChunkReader
    read_instrument_infos: ChunkReader
    read_generators: ChunkReader
    read_sample_headers: ChunkReader
    create_instruments: Callable[[Sequence[Any], Sequence[Zone], Sequence[Any]], list]
    create_presets: Callable[[Sequence[Any], Sequence[Zone], Sequence[Any]], list]


@dataclass
class SoundFontParameters:
    """Sample headers, presets and instruments of a SoundFont."""

    sample_headers: list
    presets: list
    instruments: list


_REQUIRED = (
    ("phdr", "PHDR"),
    ("pbag", "PBAG"),
    ("pgen", "PGEN"),
    ("inst", "INST"),
    ("ibag", "IBAG"),
    ("igen", "IGEN"),
    ("shdr", "SHDR"),
)


def read_parameters(stream, codec: ParameterCodec) -> SoundFontParameters:
    """Read the pdta list chunk and build presets and instruments from it."""
    readers = {
        "phdr": codec.read_preset_infos,
        "pbag": read_zone_infos,
        "pgen": codec.read_generators,
        "inst": codec.read_instrument_infos,
        "ibag": read_zone_infos,
        "igen": codec.read_generators,
        "shdr": codec.read_sample_headers,
    }
    found: dict[str, list] = {}
    for chunk_id, size, reader in iter_subchunks(stream, "pdta"):
        if chunk_id in readers:
            found[chunk_id] = readers[chunk_id](reader, size)
        elif chunk_id in ("pmod", "imod"):
            discard_data(reader, size)
        else:
            raise SoundFontError(f"the pdta list contains an unknown ID '{chunk_id}'")

    for chunk_id, label in _REQUIRED:
        if chunk_id not in found:
            raise SoundFontError(f"the {label} sub-chunk was not found")

    sample_headers = found["shdr"]
    instrument_zones = create_zones(found["ibag"], found["igen"])
    instruments = codec.create_instruments(found["inst"], instrument_zones, sample_headers)
    preset_zones = create_zones(found["pbag"], found["pgen"])
    presets = codec.create_presets(found["phdr"], preset_zones, instruments)

    return SoundFontParameters(sample_headers, presets, instruments)