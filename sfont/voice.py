"""A single sounding voice of the synthesizer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from .settings import SynthesizerSettings
from .sfmath import (
    HALF_PI,
    NON_AUDIBLE,
    cents_to_multiplying_factor,
    clamp,
    decibels_to_linear,
    linear_to_decibels,
)


class VoiceState(Enum):
    """Where a voice is in its note-off handling."""

    PLAYING = 0
    RELEASE_REQUESTED = 1
    RELEASED = 2


@dataclass
class VoiceComponents:
    """The signal-processing parts a voice drives.

    ``volume_envelope`` and ``modulation_envelope`` offer ``process(count)``,
    ``release()`` and ``value``; the LFOs offer ``process()`` and ``value``;
    the oscillator offers ``process(data, block, pitch) -> bool`` (filling
    ``block`` in place) and ``release()``; the filter offers ``clear_buffer()``,
    ``set_low_pass_filter(cutoff, resonance)`` and ``process(block)``.
    ``starter`` configures them from a region with ``start_volume_envelope``,
    ``start_modulation_envelope``, ``start_vibrato``, ``start_modulation``
    (each ``(component, region, key, velocity)``) and
    ``start_oscillator(oscillator, region)``.
    """

    volume_envelope: Any
    modulation_envelope: Any
    vibrato_lfo: Any
    modulation_lfo: Any
    oscillator: Any
    filter: Any
    starter: Any


class Voice:
    """One note being rendered, from start to the end of its release."""

    def __init__(self, settings: SynthesizerSettings, components: VoiceComponents) -> None:
        self._sample_rate = settings.sample_rate
        self._block_size = settings.block_size
        self.components = components

        self.block = [0.0] * settings.block_size

        # Gains of the previous block are kept so the mixer can ramp between
        # them and the current ones instead of jumping, which would click.
        self.previous_mix_gain_left = 0.0
        self.previous_mix_gain_right = 0.0
        self.current_mix_gain_left = 0.0
        self.current_mix_gain_right = 0.0

        self.previous_reverb_send = 0.0
        self.previous_chorus_send = 0.0
        self.current_reverb_send = 0.0
        self.current_chorus_send = 0.0

        self.exclusive_class = 0
        self.channel = 0
        self.key = 0
        self.velocity = 0

        self._note_gain = 0.0
        self._cutoff = 0.0
        self._resonance = 0.0

        self._vib_lfo_to_pitch = 0.0
        self._mod_lfo_to_pitch = 0.0
        self._mod_env_to_pitch = 0.0

        self._mod_lfo_to_cutoff = 0
        self._mod_env_to_cutoff = 0
        self._dynamic_cutoff = False

        self._mod_lfo_to_volume = 0.0
        self._dynamic_volume = False

        self._instrument_pan = 0.0
        self._instrument_reverb = 0.0
        self._instrument_chorus = 0.0

        self._smoothed_cutoff = 0.0

        self.state = VoiceState.PLAYING
        self.voice_length = 0
        self._min_voice_length = settings.sample_rate // 500

    def start(self, region, channel: int, key: int, velocity: int) -> None:
        """Begin playing ``region`` as the given note."""
        self.exclusive_class = region.exclusive_class
        self.channel = channel
        self.key = key
        self.velocity = velocity

        if velocity > 0:
            # Reducing the initial attenuation to 40% gives better loudness
            # variability across instruments.
            sample_attenuation = 0.4 * region.initial_attenuation
            filter_attenuation = 0.5 * region.initial_filter_q
            decibels = (
                2.0 * linear_to_decibels(velocity / 127.0)
                - sample_attenuation
                - filter_attenuation
            )
            self._note_gain = decibels_to_linear(decibels)
        else:
            self._note_gain = 0.0

        self._cutoff = region.initial_filter_cutoff_frequency
        self._resonance = decibels_to_linear(region.initial_filter_q)

        self._vib_lfo_to_pitch = 0.01 * region.vibrato_lfo_to_pitch
        self._mod_lfo_to_pitch = 0.01 * region.modulation_lfo_to_pitch
        self._mod_env_to_pitch = 0.01 * region.modulation_envelope_to_pitch

        self._mod_lfo_to_cutoff = region.modulation_lfo_to_filter_cutoff_frequency
        self._mod_env_to_cutoff = region.modulation_envelope_to_filter_cutoff_frequency
        self._dynamic_cutoff = self._mod_lfo_to_cutoff != 0 or self._mod_env_to_cutoff != 0

        self._mod_lfo_to_volume = region.modulation_lfo_to_volume
        self._dynamic_volume = self._mod_lfo_to_volume > 0.05

        self._instrument_pan = clamp(region.pan, -50.0, 50.0)
        self._instrument_reverb = 0.01 * region.reverb_effects_send
        self._instrument_chorus = 0.01 * region.chorus_effects_send

        parts = self.components
        starter = parts.starter
        starter.start_volume_envelope(parts.volume_envelope, region, key, velocity)
        starter.start_modulation_envelope(parts.modulation_envelope, region, key, velocity)
        starter.start_vibrato(parts.vibrato_lfo, region, key, velocity)
        starter.start_modulation(parts.modulation_lfo, region, key, velocity)
        starter.start_oscillator(parts.oscillator, region)
        parts.filter.clear_buffer()
        parts.filter.set_low_pass_filter(self._cutoff, self._resonance)

        self._smoothed_cutoff = self._cutoff

        self.state = VoiceState.PLAYING
        self.voice_length = 0

    def end(self) -> None:
        """Request the note's release."""
        if self.state == VoiceState.PLAYING:
            self.state = VoiceState.RELEASE_REQUESTED

    def kill(self) -> None:
        """Silence the voice at once."""
        self._note_gain = 0.0

    def process(self, data: Sequence[int], channels: Sequence[Any]) -> bool:
        """Render the next block into ``block``; return False when finished."""
        if self._note_gain < NON_AUDIBLE:
            return False

        parts = self.components
        channel_info = channels[self.channel]

        self._release_if_necessary(channel_info)

        if not parts.volume_envelope.process(self._block_size):
            return False

        parts.modulation_envelope.process(self._block_size)
        parts.vibrato_lfo.process()
        parts.modulation_lfo.process()

        mod_lfo_value = parts.modulation_lfo.value
        mod_env_value = parts.modulation_envelope.value

        vib_pitch_change = (
            0.01 * channel_info.modulation + self._vib_lfo_to_pitch
        ) * parts.vibrato_lfo.value
        mod_pitch_change = (
            self._mod_lfo_to_pitch * mod_lfo_value + self._mod_env_to_pitch * mod_env_value
        )
        channel_pitch_change = channel_info.tune + channel_info.pitch_bend
        pitch = self.key + vib_pitch_change + mod_pitch_change + channel_pitch_change
        if not parts.oscillator.process(data, self.block, pitch):
            return False

        if self._dynamic_cutoff:
            cents = (
                self._mod_lfo_to_cutoff * mod_lfo_value
                + self._mod_env_to_cutoff * mod_env_value
            )
            new_cutoff = cents_to_multiplying_factor(cents) * self._cutoff
            # Limit the change to between x0.5 and x2 per block to avoid pops.
            self._smoothed_cutoff = clamp(
                new_cutoff, 0.5 * self._smoothed_cutoff, 2.0 * self._smoothed_cutoff
            )
            parts.filter.set_low_pass_filter(self._smoothed_cutoff, self._resonance)
        parts.filter.process(self.block)

        self.previous_mix_gain_left = self.current_mix_gain_left
        self.previous_mix_gain_right = self.current_mix_gain_right
        self.previous_reverb_send = self.current_reverb_send
        self.previous_chorus_send = self.current_chorus_send

        # The GM specification squares the volume-expression product.
        ve = channel_info.volume * channel_info.expression
        channel_gain = ve * ve

        mix_gain = self._note_gain * channel_gain * parts.volume_envelope.value
        if self._dynamic_volume:
            mix_gain *= decibels_to_linear(self._mod_lfo_to_volume * mod_lfo_value)

        angle = (math.pi / 200.0) * (channel_info.pan + self._instrument_pan + 50.0)
        if angle <= 0.0:
            self.current_mix_gain_left = mix_gain
            self.current_mix_gain_right = 0.0
        elif angle >= HALF_PI:
            self.current_mix_gain_left = 0.0
            self.current_mix_gain_right = mix_gain
        else:
            self.current_mix_gain_left = mix_gain * math.cos(angle)
            self.current_mix_gain_right = mix_gain * math.sin(angle)

        self.current_reverb_send = clamp(
            channel_info.reverb_send + self._instrument_reverb, 0.0, 1.0
        )
        self.current_chorus_send = clamp(
            channel_info.chorus_send + self._instrument_chorus, 0.0, 1.0
        )

        if self.voice_length == 0:
            self.previous_mix_gain_left = self.current_mix_gain_left
            self.previous_mix_gain_right = self.current_mix_gain_right
            self.previous_reverb_send = self.current_reverb_send
            self.previous_chorus_send = self.current_chorus_send

        self.voice_length += self._block_size
        return True

    def _release_if_necessary(self, channel_info) -> None:
        if self.voice_length < self._min_voice_length:
            return
        if self.state == VoiceState.RELEASE_REQUESTED and not channel_info.hold_pedal:
            parts = self.components
            parts.volume_envelope.release()
            parts.modulation_envelope.release()
            parts.oscillator.release()
            self.state = VoiceState.RELEASED

    def priority(self) -> float:
        """How important the voice is; the lowest is stolen first."""
        if self._note_gain < NON_AUDIBLE:
            return 0.0
        return self.components.volume_envelope.priority