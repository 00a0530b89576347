"""Unit conversions used throughout SoundFont synthesis."""

from __future__ import annotations

import math

HALF_PI = math.pi / 2.0
NON_AUDIBLE = 1.0e-3
LOG_NON_AUDIBLE = -6.9077554


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Limit ``value`` to the closed range [minimum, maximum]."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def timecents_to_seconds(x: float) -> float:
    """Convert timecents to seconds."""
    return 2.0 ** (x / 1200.0)


def cents_to_hertz(x: float) -> float:
    """Convert absolute cents to a frequency in hertz."""
    return 8.176 * 2.0 ** (x / 1200.0)


def cents_to_multiplying_factor(x: float) -> float:
    """Convert relative cents to a frequency ratio."""
    return 2.0 ** (x / 1200.0)


def decibels_to_linear(x: float) -> float:
    """Convert decibels to a linear gain."""
    return 10.0 ** (0.05 * x)


def linear_to_decibels(x: float) -> float:
    """Convert a linear gain to decibels (``-inf`` for zero, ``nan`` below)."""
    if x > 0.0:
        return 20.0 * math.log10(x)
    if x == 0.0:
        return -math.inf
    return math.nan


def key_number_to_multiplying_factor(cents: int, key: int) -> float:
    """Scale factor applied to an envelope time by key-number tracking."""
    return timecents_to_seconds(cents * (60 - key))


def exp_cutoff(x: float) -> float:
    """``exp(x)``, but zero once the result would be inaudible."""
    if x < LOG_NON_AUDIBLE:
        return 0.0
    return math.exp(x)