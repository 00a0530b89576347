from types import SimpleNamespace

import pytest

from sfont.settings import SynthesizerSettings
from sfont.voice import Voice, VoiceComponents, VoiceState

BLOCK = 64


class FakeEnvelope:
    def __init__(self, value=1.0, priority=2.0, alive=True):
        self.value = value
        self.priority = priority
        self.alive = alive
        self.released = False

    def process(self, sample_count):
        return self.alive

    def release(self):
        self.released = True


class FakeLfo:
    def __init__(self, value=0.0):
        self.value = value

    def process(self):
        pass


class FakeOscillator:
    def __init__(self, alive=True):
        self.alive = alive
        self.released = False
        self.pitches = []

    def process(self, data, block, pitch):
        self.pitches.append(pitch)
        block[:] = [1.0] * len(block)
        return self.alive

    def release(self):
        self.released = True


class FakeFilter:
    def __init__(self):
        self.cutoffs = []
        self.cleared = 0
        self.processed = 0

    def clear_buffer(self):
        self.cleared += 1

    def set_low_pass_filter(self, cutoff, resonance):
        self.cutoffs.append((cutoff, resonance))

    def process(self, block):
        self.processed += 1


class FakeStarter:
    def __init__(self):
        self.calls = []

    def start_volume_envelope(self, envelope, region, key, velocity):
        self.calls.append("volume")

    def start_modulation_envelope(self, envelope, region, key, velocity):
        self.calls.append("modulation_envelope")

    def start_vibrato(self, lfo, region, key, velocity):
        self.calls.append("vibrato")

    def start_modulation(self, lfo, region, key, velocity):
        self.calls.append("modulation")

    def start_oscillator(self, oscillator, region):
        self.calls.append("oscillator")


def make_components(**overrides):
    parts = dict(
        volume_envelope=FakeEnvelope(),
        modulation_envelope=FakeEnvelope(value=0.0),
        vibrato_lfo=FakeLfo(),
        modulation_lfo=FakeLfo(),
        oscillator=FakeOscillator(),
        filter=FakeFilter(),
        starter=FakeStarter(),
    )
    parts.update(overrides)
    return VoiceComponents(**parts)


def make_region(**overrides):
    values = dict(
        exclusive_class=0,
        initial_attenuation=0.0,
        initial_filter_q=0.0,
        initial_filter_cutoff_frequency=1000.0,
        vibrato_lfo_to_pitch=0,
        modulation_lfo_to_pitch=0,
        modulation_envelope_to_pitch=0,
        modulation_lfo_to_filter_cutoff_frequency=0,
        modulation_envelope_to_filter_cutoff_frequency=0,
        modulation_lfo_to_volume=0.0,
        pan=0.0,
        reverb_effects_send=0.0,
        chorus_effects_send=0.0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_channel(**overrides):
    values = dict(
        modulation=0.0,
        tune=0.0,
        pitch_bend=0.0,
        volume=1.0,
        expression=1.0,
        pan=0.0,
        reverb_send=0.0,
        chorus_send=0.0,
        hold_pedal=False,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_voice(components=None):
    settings = SynthesizerSettings(48000, block_size=BLOCK)
    return Voice(settings, components or make_components())


def test_start_records_note_and_starts_components():
    parts = make_components()
    voice = make_voice(parts)
    voice.start(make_region(exclusive_class=7), 2, 60, 100)
    assert (voice.channel, voice.key, voice.velocity, voice.exclusive_class) == (2, 60, 100, 7)
    assert parts.starter.calls == [
        "volume",
        "modulation_envelope",
        "vibrato",
        "modulation",
        "oscillator",
    ]
    assert parts.filter.cleared == 1
    assert parts.filter.cutoffs[-1] == (1000.0, 1.0)
    assert voice.state == VoiceState.PLAYING
    assert voice.voice_length == 0


def test_full_velocity_hard_left():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 127)
    assert voice.process([], [make_channel(pan=-50.0)]) is True
    assert voice.current_mix_gain_left == pytest.approx(1.0)
    assert voice.current_mix_gain_right == 0.0
    assert voice.previous_mix_gain_left == voice.current_mix_gain_left
    assert voice.block == [1.0] * BLOCK


def test_hard_right():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 127)
    voice.process([], [make_channel(pan=50.0)])
    assert voice.current_mix_gain_left == pytest.approx(0.0, abs=1e-9)
    assert voice.current_mix_gain_right == pytest.approx(1.0)


def test_center_pan_is_balanced():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 90)
    voice.process([], [make_channel()])
    assert voice.current_mix_gain_left == pytest.approx(voice.current_mix_gain_right)
    assert 0.0 < voice.current_mix_gain_left < 1.0


def test_lower_velocity_is_quieter():
    loud = make_voice()
    soft = make_voice()
    loud.start(make_region(), 0, 60, 120)
    soft.start(make_region(), 0, 60, 40)
    loud.process([], [make_channel()])
    soft.process([], [make_channel()])
    assert soft.current_mix_gain_left < loud.current_mix_gain_left


def test_killed_voice_stops():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 100)
    voice.kill()
    assert voice.priority() == 0.0
    assert voice.process([], [make_channel()]) is False


def test_zero_velocity_is_silent():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 0)
    assert voice.priority() == 0.0
    assert voice.process([], [make_channel()]) is False


def test_priority_comes_from_envelope():
    parts = make_components(volume_envelope=FakeEnvelope(priority=2.5))
    voice = make_voice(parts)
    voice.start(make_region(), 0, 60, 100)
    assert voice.priority() == parts.volume_envelope.priority


def test_finished_envelope_stops_voice():
    voice = make_voice(make_components(volume_envelope=FakeEnvelope(alive=False)))
    voice.start(make_region(), 0, 60, 100)
    assert voice.process([], [make_channel()]) is False


def test_finished_oscillator_stops_voice():
    voice = make_voice(make_components(oscillator=FakeOscillator(alive=False)))
    voice.start(make_region(), 0, 60, 100)
    assert voice.process([], [make_channel()]) is False


def test_voice_length_grows_by_block():
    voice = make_voice()
    voice.start(make_region(), 0, 60, 100)
    channels = [make_channel()]
    voice.process([], channels)
    voice.process([], channels)
    assert voice.voice_length == 2 * BLOCK


def test_pitch_includes_key_and_bend():
    parts = make_components()
    voice = make_voice(parts)
    voice.start(make_region(), 0, 60, 100)
    voice.process([], [make_channel()])
    voice.process([], [make_channel(pitch_bend=2.0)])
    assert parts.oscillator.pitches[0] == 60
    assert parts.oscillator.pitches[1] == pytest.approx(62.0)


def test_release_waits_for_minimum_length():
    parts = make_components()
    voice = make_voice(parts)
    voice.start(make_region(), 0, 60, 100)
    channels = [make_channel()]
    voice.end()
    voice.process([], channels)
    assert voice.state == VoiceState.RELEASE_REQUESTED
    assert parts.volume_envelope.released is False
    voice.process([], channels)
    voice.process([], channels)
    assert voice.state == VoiceState.RELEASED
    assert parts.volume_envelope.released
    assert parts.modulation_envelope.released
    assert parts.oscillator.released


def test_hold_pedal_defers_release():
    parts = make_components()
    voice = make_voice(parts)
    voice.start(make_region(), 0, 60, 100)
    held = [make_channel(hold_pedal=True)]
    for _ in range(4):
        voice.process([], held)
    voice.end()
    voice.process([], held)
    assert voice.state == VoiceState.RELEASE_REQUESTED
    voice.process([], [make_channel()])
    assert voice.state == VoiceState.RELEASED


def test_sends_are_clamped():
    voice = make_voice()
    voice.start(make_region(reverb_effects_send=50.0, chorus_effects_send=-50.0), 0, 60, 100)
    voice.process([], [make_channel(reverb_send=0.9, chorus_send=0.1)])
    assert voice.current_reverb_send == 1.0
    assert voice.current_chorus_send == 0.0


def test_dynamic_cutoff_change_is_limited():
    parts = make_components(modulation_lfo=FakeLfo(value=1.0))
    voice = make_voice(parts)
    voice.start(
        make_region(modulation_lfo_to_filter_cutoff_frequency=2400), 0, 60, 100
    )
    voice.process([], [make_channel()])
    cutoff, resonance = parts.filter.cutoffs[-1]
    assert cutoff == pytest.approx(2000.0)
    assert resonance == 1.0