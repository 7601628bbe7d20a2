from __future__ import annotations

import math

import pytest

from httpdimmer.core.codec import (
    clamp_int,
    from_canonical_brightness,
    parse_boolean_loose,
    to_canonical_brightness,
)
from httpdimmer.core.model import Scale


@pytest.mark.parametrize("value", ["ON", "On", " true ", 1, "1", True, 2.5, "yes", {}, []])
def test_parse_boolean_loose_truthy(value: object) -> None:
    assert parse_boolean_loose(value) is True


@pytest.mark.parametrize("value", ["off", "OFF", 0, "0", False, "", None, 0.0])
def test_parse_boolean_loose_falsy(value: object) -> None:
    assert parse_boolean_loose(value) is False


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "abc", None, [1], {"a": 1}])
def test_clamp_int_non_finite_returns_fallback(value: object) -> None:
    assert clamp_int(value, 0, 100, 42) == 42


def test_clamp_int_rounds_half_up_and_clamps() -> None:
    assert clamp_int(2.5, 0, 100) == 3
    assert clamp_int(49.49, 0, 100) == 49
    assert clamp_int("  12.5 ", 0, 100) == 13
    assert clamp_int(-5, 0, 100) == 0
    assert clamp_int(250, 0, 100) == 100
    assert clamp_int("", 0, 100, 7) == 0
    assert clamp_int(True, 0, 100) == 1


def test_hundred_scale_round_trips_exactly() -> None:
    for level in range(101):
        wire = from_canonical_brightness(level, Scale.ZERO_TO_HUNDRED)
        assert wire == level
        assert to_canonical_brightness(wire, "0-100", -1) == level


def test_byte_scale_round_trips_without_off_by_one() -> None:
    for level in range(101):
        wire = from_canonical_brightness(level, "0-255")
        assert isinstance(wire, int)
        assert 0 <= wire <= 255
        assert to_canonical_brightness(wire, "0-255", -1) == level


def test_byte_scale_known_values() -> None:
    assert to_canonical_brightness(128, "0-255") == 50
    assert to_canonical_brightness(255, "0-255") == 100
    assert from_canonical_brightness(50, "0-255") == 128
    assert from_canonical_brightness(100, "0-255") == 255


def test_fractional_scale() -> None:
    assert from_canonical_brightness(50, "0-1") == "0.500"
    assert from_canonical_brightness(7, "0-1") == "0.070"
    assert to_canonical_brightness("0.25", "0-1") == 25
    assert to_canonical_brightness(1, "0-1") == 100


def test_to_canonical_fallback_and_clamp() -> None:
    assert to_canonical_brightness(None, "0-100", 33) == 33
    assert to_canonical_brightness("dim", "0-100", 33) == 33
    assert to_canonical_brightness(400, "0-255") == 100
    assert to_canonical_brightness(-3, "0-100") == 0


def test_from_canonical_clamps_input() -> None:
    assert from_canonical_brightness(150, "0-100") == 100
    assert from_canonical_brightness(-1, "0-255") == 0
    assert from_canonical_brightness("nope", "0-100") == 0


def test_unknown_scale_is_identity() -> None:
    assert to_canonical_brightness(40, "0-1000") == 40
    assert from_canonical_brightness(40, None) == 40


def test_huge_integers_are_treated_as_non_finite() -> None:
    huge = 10**400
    assert clamp_int(huge, 0, 100, 7) == 7
    assert clamp_int(-huge, 0, 100, 7) == 7
    assert to_canonical_brightness(huge, "0-255", 33) == 33
    assert from_canonical_brightness(huge, "0-100") == 0
