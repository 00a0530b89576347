"""The pool of voices shared by all channels."""

from __future__ import annotations

import math
from typing import Any, Callable, Sequence

from .settings import SynthesizerSettings
from .voice import Voice, VoiceComponents


class VoiceCollection:
    """A fixed number of voices; the first ``active_voice_count`` are sounding."""

    def __init__(
        self,
        settings: SynthesizerSettings,
        components_factory: Callable[[SynthesizerSettings], VoiceComponents],
    ) -> None:
        self._voices = [
            Voice(settings, components_factory(settings))
            for _ in range(settings.maximum_polyphony)
        ]
        self.active_voice_count = 0

    def request_new(self, region, channel: int) -> Voice:
        """Return a voice to start a note on, stealing one if all are busy."""
        active = self._voices[: self.active_voice_count]

        # A voice with the same exclusive class on the same channel is reused,
        # so that such notes never sound together.
        exclusive_class = region.exclusive_class
        if exclusive_class != 0:
            for voice in active:
                if voice.exclusive_class == exclusive_class and voice.channel == channel:
                    return voice

        if self.active_voice_count < len(self._voices):
            voice = self._voices[self.active_voice_count]
            self.active_voice_count += 1
            return voice

        # Every voice is busy: take the least important, preferring the oldest.
        candidate = self._voices[0]
        lowest_priority = math.inf
        for voice in active:
            priority = voice.priority()
            if priority < lowest_priority:
                lowest_priority = priority
                candidate = voice
            elif priority == lowest_priority and voice.voice_length > candidate.voice_length:
                candidate = voice
        return candidate

    def process(self, data: Sequence[int], channels: Sequence[Any]) -> None:
        """Render every active voice, retiring those that have finished."""
        voices = self._voices
        i = 0
        while i < self.active_voice_count:
            if voices[i].process(data, channels):
                i += 1
            else:
                self.active_voice_count -= 1
                last = self.active_voice_count
                voices[i], voices[last] = voices[last], voices[i]

    def active_voices(self) -> list[Voice]:
        """The voices currently sounding."""
        return self._voices[: self.active_voice_count]

    def clear(self) -> None:
        """Stop every voice at once."""
        self.active_voice_count = 0