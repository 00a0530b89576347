"""Settings for synthesis."""

from __future__ import annotations

from dataclasses import dataclass


class SynthesizerSettingsError(ValueError):
    """Raised when a synthesis setting is out of its allowed range."""


@dataclass
class SynthesizerSettings:
    """Parameters for synthesis."""

    sample_rate: int
    block_size: int = 64
    maximum_polyphony: int = 64
    enable_reverb_and_chorus: bool = True

    def validate(self) -> None:
        """Raise SynthesizerSettingsError if any setting is out of range."""
        if not 16_000 <= self.sample_rate <= 192_000:
            raise SynthesizerSettingsError(
                f"the sample rate must be between 16000 and 192000, "
                f"but was {self.sample_rate}"
            )
        if not 8 <= self.block_size <= 1024:
            raise SynthesizerSettingsError(
                f"the block size must be between 8 and 1024, but was {self.block_size}"
            )
        if not 8 <= self.maximum_polyphony <= 256:
            raise SynthesizerSettingsError(
                f"the maximum number of polyphony must be between 8 and 256, "
                f"but was {self.maximum_polyphony}"
            )