"""Conversions between raw device values and canonical on/off and 0-100 brightness."""

from __future__ import annotations

import math
from typing import Any

from httpdimmer.core.model import Scale

_TRUE_TOKENS = frozenset({"true", "on", "1"})
_FALSE_TOKENS = frozenset({"false", "off", "0"})


def _to_number(value: Any) -> float:
    """Coerce loosely to a float; anything that is not a number becomes NaN."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.copysign(math.inf, value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def parse_boolean_loose(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
        return bool(value)
    # Objects and arrays are truthy regardless of content.
    return value is not None


def clamp_int(value: Any, minimum: int, maximum: int, fallback: int = 0) -> int:
    number = _to_number(value)
    if not math.isfinite(number):
        return fallback
    return max(minimum, min(maximum, _round_half_up(number)))


def to_canonical_brightness(raw: Any, scale: Scale | str | None, fallback: int = 0) -> int:
    """Convert a device brightness reading into the 0-100 range."""
    number = _to_number(raw)
    if not math.isfinite(number):
        return fallback

    scale = Scale.parse(scale)
    if scale is Scale.ZERO_TO_ONE:
        return clamp_int(number * 100, 0, 100, fallback)
    if scale is Scale.ZERO_TO_255:
        return clamp_int((number / 255) * 100, 0, 100, fallback)
    return clamp_int(number, 0, 100, fallback)


def from_canonical_brightness(canonical: Any, scale: Scale | str | None) -> int | str:
    """Convert a 0-100 brightness into the device's wire representation.

    `0-1` yields a three-decimal string (``"0.500"``); the other scales yield ints.
    The 0-255 conversion rounds, so a round trip through it is not guaranteed to be
    exact for arbitrary device values.
    """
    level = clamp_int(canonical, 0, 100, 0)

    scale = Scale.parse(scale)
    if scale is Scale.ZERO_TO_ONE:
        return f"{level / 100:.3f}"
    if scale is Scale.ZERO_TO_255:
        return clamp_int((level / 100) * 255, 0, 255, 0)
    return level
