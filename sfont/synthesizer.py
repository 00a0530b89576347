"""The SoundFont synthesizer: MIDI message handling and block rendering."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from .settings import SynthesizerSettings
from .sfmath import NON_AUDIBLE
from .voice import VoiceComponents
from .voices import VoiceCollection

CHANNEL_COUNT = 16
PERCUSSION_CHANNEL = 9

_CONTROLLERS = {
    0x00: "set_bank",
    0x01: "set_modulation_coarse",
    0x21: "set_modulation_fine",
    0x06: "data_entry_coarse",
    0x26: "data_entry_fine",
    0x07: "set_volume_coarse",
    0x27: "set_volume_fine",
    0x0A: "set_pan_coarse",
    0x2A: "set_pan_fine",
    0x0B: "set_expression_coarse",
    0x2B: "set_expression_fine",
    0x40: "set_hold_pedal",
    0x5B: "set_reverb_send",
    0x5D: "set_chorus_send",
    0x65: "set_rpn_coarse",
    0x64: "set_rpn_fine",
}


def _multiply_add(gain: float, source: Sequence[float], destination: list[float]) -> None:
    for i, sample in enumerate(source):
        destination[i] += gain * sample


def _multiply_add_slope(
    gain: float, step: float, source: Sequence[float], destination: list[float]
) -> None:
    for i, sample in enumerate(source):
        destination[i] += gain * sample
        gain += step


class Effects:
    """Reverb and chorus units together with their work buffers.

    ``reverb`` offers ``input_gain``, ``process(input, left, right)`` and
    ``mute()``; ``chorus`` offers ``process(in_left, in_right, out_left,
    out_right)`` and ``mute()``. Outputs are written in place.
    """

    def __init__(self, settings: SynthesizerSettings, reverb: Any, chorus: Any) -> None:
        size = settings.block_size
        self.reverb = reverb
        self.reverb_input = [0.0] * size
        self.reverb_output_left = [0.0] * size
        self.reverb_output_right = [0.0] * size

        self.chorus = chorus
        self.chorus_input_left = [0.0] * size
        self.chorus_input_right = [0.0] * size
        self.chorus_output_left = [0.0] * size
        self.chorus_output_right = [0.0] * size


class Synthesizer:
    """A SoundFont synthesizer driven by MIDI messages.

    ``sound_font`` provides ``presets`` (each with ``bank_number``,
    ``patch_number`` and ``regions``), ``instruments`` (each with ``regions``)
    and ``wave_data``. Preset regions have ``contains(key, velocity)`` and an
    ``instrument`` index; instrument regions have ``contains`` and
    ``exclusive_class``.
    """

    CHANNEL_COUNT = CHANNEL_COUNT
    PERCUSSION_CHANNEL = PERCUSSION_CHANNEL

    def __init__(
        self,
        sound_font: Any,
        settings: SynthesizerSettings,
        *,
        create_channel: Callable[[bool], Any],
        create_voice_components: Callable[[SynthesizerSettings], VoiceComponents],
        create_region_pair: Callable[[Any, Any], Any],
        create_reverb: Callable[[int], Any] | None = None,
        create_chorus: Callable[[int, float, float, float], Any] | None = None,
    ) -> None:
        settings.validate()

        self.sound_font = sound_font
        self.sample_rate = settings.sample_rate
        self.block_size = settings.block_size
        self.maximum_polyphony = settings.maximum_polyphony
        self._create_region_pair = create_region_pair

        # The preset ID holds the bank number in the upper 16 bits and the
        # patch number in the lower 16 bits. The preset with the smallest ID
        # is the default; for a GM-compatible SoundFont that is the piano.
        self._preset_lookup: dict[int, int] = {}
        self._default_preset = 0
        min_preset_id = None
        for index, preset in enumerate(sound_font.presets):
            preset_id = (preset.bank_number << 16) | preset.patch_number
            self._preset_lookup[preset_id] = index
            if min_preset_id is None or preset_id < min_preset_id:
                self._default_preset = index
                min_preset_id = preset_id

        self.channels = [
            create_channel(i == PERCUSSION_CHANNEL) for i in range(CHANNEL_COUNT)
        ]
        self._voices = VoiceCollection(settings, create_voice_components)

        self._block_left = [0.0] * self.block_size
        self._block_right = [0.0] * self.block_size
        self._inverse_block_size = 1.0 / self.block_size
        self._block_read = self.block_size

        self.master_volume = 0.5

        self._effects: Effects | None = None
        if settings.enable_reverb_and_chorus:
            if create_reverb is None or create_chorus is None:
                raise ValueError(
                    "reverb and chorus are enabled but no factory was given for them"
                )
            self._effects = Effects(
                settings,
                create_reverb(settings.sample_rate),
                create_chorus(settings.sample_rate, 0.002, 0.0019, 0.4),
            )

    @property
    def enable_reverb_and_chorus(self) -> bool:
        """Whether reverb and chorus are applied."""
        return self._effects is not None

    @property
    def active_voice_count(self) -> int:
        """The number of voices currently sounding."""
        return self._voices.active_voice_count

    def _valid_channel(self, channel: int) -> bool:
        return 0 <= channel < len(self.channels)

    def process_midi_message(
        self, channel: int, command: int, data1: int, data2: int
    ) -> None:
        """Handle one MIDI channel message; unknown messages are ignored."""
        if not self._valid_channel(channel):
            return
        channel_info = self.channels[channel]

        if command == 0x80:
            self.note_off(channel, data1)
        elif command == 0x90:
            self.note_on(channel, data1, data2)
        elif command == 0xB0:
            if data1 in _CONTROLLERS:
                getattr(channel_info, _CONTROLLERS[data1])(data2)
            elif data1 == 0x78:
                self.note_off_all_channel(channel, True)
            elif data1 == 0x79:
                self.reset_all_controllers_channel(channel)
            elif data1 == 0x7B:
                self.note_off_all_channel(channel, False)
        elif command == 0xC0:
            channel_info.set_patch(data1)
        elif command == 0xE0:
            channel_info.set_pitch_bend(data1, data2)

    def note_off(self, channel: int, key: int) -> None:
        """Release the notes with the given key on the channel."""
        if not self._valid_channel(channel):
            return
        for voice in self._voices.active_voices():
            if voice.channel == channel and voice.key == key:
                voice.end()

    def _find_preset(self, channel_info: Any) -> int:
        bank = channel_info.bank_number
        patch = channel_info.patch_number
        preset_id = (bank << 16) | patch
        if preset_id in self._preset_lookup:
            return self._preset_lookup[preset_id]
        # Fall back to the GM sound set: the same patch in bank 0, or the
        # standard drum set (128:0) for drum banks.
        gm_preset_id = patch if bank < 128 else 128 << 16
        return self._preset_lookup.get(gm_preset_id, self._default_preset)

    def note_on(self, channel: int, key: int, velocity: int) -> None:
        """Start a note; a velocity of zero releases it instead."""
        if velocity == 0:
            self.note_off(channel, key)
            return
        if not self._valid_channel(channel):
            return

        preset = self.sound_font.presets[self._find_preset(self.channels[channel])]
        for preset_region in preset.regions:
            if not preset_region.contains(key, velocity):
                continue
            instrument = self.sound_font.instruments[preset_region.instrument]
            for instrument_region in instrument.regions:
                if not instrument_region.contains(key, velocity):
                    continue
                region_pair = self._create_region_pair(preset_region, instrument_region)
                voice = self._voices.request_new(instrument_region, channel)
                voice.start(region_pair, channel, key, velocity)

    def note_off_all(self, immediate: bool) -> None:
        """Stop every note; ``immediate`` skips the release."""
        if immediate:
            self._voices.clear()
        else:
            for voice in self._voices.active_voices():
                voice.end()

    def note_off_all_channel(self, channel: int, immediate: bool) -> None:
        """Stop every note on a channel; ``immediate`` skips the release."""
        for voice in self._voices.active_voices():
            if voice.channel == channel:
                if immediate:
                    voice.kill()
                else:
                    voice.end()

    def reset_all_controllers(self) -> None:
        """Reset the controllers of every channel."""
        for channel in self.channels:
            channel.reset_all_controllers()

    def reset_all_controllers_channel(self, channel: int) -> None:
        """Reset the controllers of one channel."""
        if not self._valid_channel(channel):
            return
        self.channels[channel].reset_all_controllers()

    def reset(self) -> None:
        """Silence all voices and return channels and effects to their start."""
        self._voices.clear()
        for channel in self.channels:
            channel.reset()
        if self._effects is not None:
            self._effects.reverb.mute()
            self._effects.chorus.mute()
        self._block_read = self.block_size

    def render(self, length: int) -> tuple[list[float], list[float]]:
        """Render ``length`` stereo samples and return the left and right parts."""
        if length < 0:
            raise ValueError(f"the length must not be negative, but was {length}")
        left: list[float] = []
        right: list[float] = []
        while len(left) < length:
            if self._block_read == self.block_size:
                self._render_block()
                self._block_read = 0
            count = min(self.block_size - self._block_read, length - len(left))
            stop = self._block_read + count
            left.extend(self._block_left[self._block_read:stop])
            right.extend(self._block_right[self._block_read:stop])
            self._block_read = stop
        return left, right

    def _write_block(
        self,
        previous_gain: float,
        current_gain: float,
        source: Sequence[float],
        destination: list[float],
    ) -> None:
        if max(previous_gain, current_gain) < NON_AUDIBLE:
            return
        if abs(current_gain - previous_gain) < 1.0e-3:
            _multiply_add(current_gain, source, destination)
        else:
            step = self._inverse_block_size * (current_gain - previous_gain)
            _multiply_add_slope(previous_gain, step, source, destination)

    def _render_block(self) -> None:
        self._voices.process(self.sound_font.wave_data, self.channels)

        size = self.block_size
        self._block_left = [0.0] * size
        self._block_right = [0.0] * size
        volume = self.master_volume
        voices = self._voices.active_voices()

        for voice in voices:
            self._write_block(
                volume * voice.previous_mix_gain_left,
                volume * voice.current_mix_gain_left,
                voice.block,
                self._block_left,
            )
            self._write_block(
                volume * voice.previous_mix_gain_right,
                volume * voice.current_mix_gain_right,
                voice.block,
                self._block_right,
            )

        effects = self._effects
        if effects is None:
            return

        effects.chorus_input_left[:] = [0.0] * size
        effects.chorus_input_right[:] = [0.0] * size
        for voice in voices:
            self._write_block(
                voice.previous_chorus_send * voice.previous_mix_gain_left,
                voice.current_chorus_send * voice.current_mix_gain_left,
                voice.block,
                effects.chorus_input_left,
            )
            self._write_block(
                voice.previous_chorus_send * voice.previous_mix_gain_right,
                voice.current_chorus_send * voice.current_mix_gain_right,
                voice.block,
                effects.chorus_input_right,
            )
        effects.chorus.process(
            effects.chorus_input_left,
            effects.chorus_input_right,
            effects.chorus_output_left,
            effects.chorus_output_right,
        )
        _multiply_add(volume, effects.chorus_output_left, self._block_left)
        _multiply_add(volume, effects.chorus_output_right, self._block_right)

        reverb = effects.reverb
        effects.reverb_input[:] = [0.0] * size
        for voice in voices:
            previous_gain = (
                reverb.input_gain
                * voice.previous_reverb_send
                * (voice.previous_mix_gain_left + voice.previous_mix_gain_right)
            )
            current_gain = (
                reverb.input_gain
                * voice.current_reverb_send
                * (voice.current_mix_gain_left + voice.current_mix_gain_right)
            )
            self._write_block(previous_gain, current_gain, voice.block, effects.reverb_input)
        reverb.process(
            effects.reverb_input, effects.reverb_output_left, effects.reverb_output_right
        )
        _multiply_add(volume, effects.reverb_output_left, self._block_left)
        _multiply_add(volume, effects.reverb_output_right, self._block_right)