"""SoundFont 2 chunk readers, synthesis conversions, a volume envelope and a synthesizer voice core."""

__version__ = "0.1.0"