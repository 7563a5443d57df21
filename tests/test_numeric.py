"""Tests for numeric helpers."""

import math

from wellness_tracker.numeric import (
    format_factor,
    round_half_up,
    safe_number,
    tidy_text,
)


def test_safe_number_coerces_and_falls_back() -> None:
    assert safe_number(3) == 3.0
    assert safe_number("2.5") == 2.5
    assert safe_number(" ") == 0.0
    assert safe_number("abc", 7) == 7
    assert safe_number(None, 100) == 100
    assert safe_number(math.nan, 1) == 1
    assert safe_number(math.inf) == 0.0
    assert safe_number(True, 5) == 5


def test_round_half_up_ignores_float_representation() -> None:
    assert round_half_up(2.345, 2) == 2.35
    assert round_half_up(0.5) == 1.0
    assert round_half_up(1.005, 2) == 1.01
    assert round_half_up(-1.25, 1) == -1.2
    assert round_half_up(-2.5) == -2.0
    assert round_half_up(-2.51) == -3.0
    assert round_half_up(math.nan) == 0.0
    assert round_half_up("12.44", 1) == 12.4


def test_format_factor() -> None:
    assert format_factor(math.nan) == "∞"
    assert format_factor(math.inf, is_energy_factor=True) == "∞"
    assert format_factor(42.5) == "43"
    assert format_factor(1.5, is_energy_factor=True) == "1.5"
    assert format_factor(2, is_energy_factor=True) == "2.0"


def test_tidy_text_title_cases_descriptions() -> None:
    assert tidy_text("CHICKEN BREAST, ROASTED") == "Chicken Breast, Roasted"
    assert tidy_text("beans and rice with cheese") == "Beans and Rice with Cheese"
    assert tidy_text("usda sr legacy") == "USDA SR Legacy"
    assert tidy_text(None) == ""
