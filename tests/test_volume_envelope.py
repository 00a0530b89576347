import pytest

from sfont.settings import SynthesizerSettings
from sfont.sfmath import NON_AUDIBLE
from sfont.volume_envelope import EnvelopeStage, VolumeEnvelope

RATE = 48000


@pytest.fixture
def envelope():
    return VolumeEnvelope(SynthesizerSettings(RATE))


def test_delay_stage_is_silent(envelope):
    envelope.start(1.0, 1.0, 1.0, 1.0, 0.5, 1.0)
    assert envelope.stage == EnvelopeStage.DELAY
    assert envelope.value == 0.0
    assert envelope.priority == 4.0
    assert envelope.process(0) is True


def test_attack_rises_linearly(envelope):
    envelope.start(0.0, 1.0, 1.0, 1.0, 0.5, 1.0)
    assert envelope.process(RATE // 2) is True
    assert envelope.stage == EnvelopeStage.ATTACK
    assert envelope.value == pytest.approx(0.5)
    assert envelope.priority == pytest.approx(3.0 + envelope.value)


def test_hold_stage_is_full_level(envelope):
    envelope.start(0.0, 0.5, 1.0, 1.0, 0.5, 1.0)
    assert envelope.process(RATE) is True
    assert envelope.stage == EnvelopeStage.HOLD
    assert envelope.value == 1.0
    assert envelope.priority == 3.0


def test_decay_settles_at_sustain(envelope):
    envelope.start(0.0, 0.1, 0.1, 0.1, 0.25, 1.0)
    assert envelope.process(RATE * 5) is True
    assert envelope.stage == EnvelopeStage.DECAY
    assert envelope.value == pytest.approx(0.25)
    assert envelope.priority == pytest.approx(1.0 + envelope.value)


def test_decay_to_zero_sustain_ends(envelope):
    envelope.start(0.0, 0.01, 0.01, 0.1, 0.0, 1.0)
    assert envelope.process(RATE * 5) is False
    assert envelope.value < NON_AUDIBLE


def test_sustain_is_clamped_to_one(envelope):
    envelope.start(0.0, 0.01, 0.01, 0.1, 2.0, 1.0)
    envelope.process(RATE)
    assert envelope.stage == EnvelopeStage.DECAY
    assert envelope.value == 1.0


def test_zero_attack_goes_straight_to_hold(envelope):
    envelope.start(0.0, 0.0, 1.0, 1.0, 0.5, 1.0)
    assert envelope.stage == EnvelopeStage.HOLD
    assert envelope.value == 1.0


def test_release_decays_and_ends(envelope):
    envelope.start(0.0, 0.01, 1.0, 1.0, 1.0, 0.2)
    envelope.process(RATE // 10)
    level = envelope.value
    envelope.release()
    assert envelope.stage == EnvelopeStage.RELEASE
    assert envelope.process(RATE // 100) is True
    assert 0.0 < envelope.value < level
    assert envelope.priority == envelope.value
    assert envelope.process(RATE * 5) is False
    assert envelope.value < NON_AUDIBLE


def test_restart_resets_state(envelope):
    envelope.start(0.0, 0.01, 0.01, 0.1, 0.0, 1.0)
    envelope.process(RATE * 5)
    envelope.start(1.0, 1.0, 1.0, 1.0, 0.5, 1.0)
    assert envelope.stage == EnvelopeStage.DELAY
    assert envelope.value == 0.0