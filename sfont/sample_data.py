"""The sample data (sdta) list of a SoundFont."""

from __future__ import annotations

import sys
from array import array
from dataclasses import dataclass

from .chunks import SoundFontError, discard_data, iter_subchunks


@dataclass
class SoundFontSampleData:
    """The 16-bit waveform data shared by all samples."""

    wave_data: array
    bits_per_sample: int = 16


def _read_wave_data(stream, size: int) -> array:
    raw = stream.read(size)
    if len(raw) != size:
        raise SoundFontError(
            f"unexpected end of data: wanted {size} bytes, got {len(raw)}"
        )
    wave = array("h")
    wave.frombytes(raw[: size - size % 2])
    if sys.byteorder == "big":
        wave.byteswap()
    return wave


def read_sample_data(stream) -> SoundFontSampleData:
    """Read the sdta list chunk, keeping only the 16-bit samples."""
    wave_data = None
    for chunk_id, size, reader in iter_subchunks(stream, "sdta"):
        if chunk_id == "smpl":
            wave_data = _read_wave_data(reader, size)
        elif chunk_id == "sm24":
            discard_data(reader, size)
        else:
            raise SoundFontError(f"the sdta list contains an unknown ID '{chunk_id}'")

    if wave_data is None:
        raise SoundFontError("no valid sample data was found")

    if wave_data[:2].tobytes() == b"OggS" or _starts_with_ogg(wave_data):
        raise SoundFontError("SoundFont3 (compressed samples) is not supported")

    return SoundFontSampleData(wave_data)


def _starts_with_ogg(wave_data: array) -> bool:
    head = wave_data[:2]
    if sys.byteorder == "big":
        head.byteswap()
    return head.tobytes() == b"OggS"