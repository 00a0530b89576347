"""The volume envelope (DAHDSR) of a voice."""

from __future__ import annotations

import math
from enum import IntEnum

from .settings import SynthesizerSettings
from .sfmath import NON_AUDIBLE, clamp, exp_cutoff


class EnvelopeStage(IntEnum):
    """The stages an envelope passes through, in order."""

    DELAY = 0
    ATTACK = 1
    HOLD = 2
    DECAY = 3
    RELEASE = 4


def _ratio(numerator: float, denominator: float) -> float:
    """Divide, giving a signed infinity for a zero denominator."""
    if denominator == 0:
        return math.copysign(math.inf, numerator)
    return numerator / denominator


class VolumeEnvelope:
    """Delay, attack, hold, decay, sustain and release of a voice's loudness."""

    def __init__(self, settings: SynthesizerSettings) -> None:
        self._sample_rate = settings.sample_rate

        self._attack_slope = 0.0
        self._decay_slope = 0.0
        self._release_slope = 0.0

        self._attack_start_time = 0.0
        self._hold_start_time = 0.0
        self._decay_start_time = 0.0
        self._release_start_time = 0.0

        self._sustain_level = 0.0
        self._release_level = 0.0

        self._processed_sample_count = 0
        self._stage = EnvelopeStage.DELAY
        self._value = 0.0
        self._priority = 0.0

    @property
    def value(self) -> float:
        """The current gain of the envelope."""
        return self._value

    @property
    def priority(self) -> float:
        """How important the voice is; lower values are stolen first."""
        return self._priority

    @property
    def stage(self) -> EnvelopeStage:
        """The stage the envelope is in."""
        return self._stage

    def start(
        self,
        delay: float,
        attack: float,
        hold: float,
        decay: float,
        sustain: float,
        release: float,
    ) -> None:
        """Begin the envelope; times are in seconds, sustain is a linear level."""
        self._attack_slope = _ratio(1.0, attack)
        self._decay_slope = _ratio(-9.226, decay)
        self._release_slope = _ratio(-9.226, release)

        self._attack_start_time = float(delay)
        self._hold_start_time = self._attack_start_time + attack
        self._decay_start_time = self._hold_start_time + hold
        self._release_start_time = 0.0

        self._sustain_level = clamp(sustain, 0.0, 1.0)
        self._release_level = 0.0

        self._processed_sample_count = 0
        self._stage = EnvelopeStage.DELAY
        self._value = 0.0

        self.process(0)

    def release(self) -> None:
        """Enter the release stage from the current level."""
        self._stage = EnvelopeStage.RELEASE
        self._release_start_time = self._processed_sample_count / self._sample_rate
        self._release_level = self._value

    def _stage_end_time(self) -> float:
        if self._stage == EnvelopeStage.DELAY:
            return self._attack_start_time
        if self._stage == EnvelopeStage.ATTACK:
            return self._hold_start_time
        return self._decay_start_time

    def process(self, sample_count: int) -> bool:
        """Advance by ``sample_count`` samples; return False once inaudible."""
        self._processed_sample_count += sample_count
        current_time = self._processed_sample_count / self._sample_rate

        while self._stage <= EnvelopeStage.HOLD:
            if current_time < self._stage_end_time():
                break
            self._stage = EnvelopeStage(self._stage + 1)

        stage = self._stage
        if stage == EnvelopeStage.DELAY:
            self._value = 0.0
            self._priority = 4.0 + self._value
            return True
        if stage == EnvelopeStage.ATTACK:
            self._value = self._attack_slope * (current_time - self._attack_start_time)
            self._priority = 3.0 + self._value
            return True
        if stage == EnvelopeStage.HOLD:
            self._value = 1.0
            self._priority = 2.0 + self._value
            return True
        if stage == EnvelopeStage.DECAY:
            decayed = exp_cutoff(
                self._decay_slope * (current_time - self._decay_start_time)
            )
            self._value = decayed if decayed > self._sustain_level else self._sustain_level
            self._priority = 1.0 + self._value
            return self._value > NON_AUDIBLE
        self._value = self._release_level * exp_cutoff(
            self._release_slope * (current_time - self._release_start_time)
        )
        self._priority = self._value
        return self._value > NON_AUDIBLE