"""Tests for the energy calculator."""

import pytest

from wellness_tracker.domain.energy import BodyProfile
from wellness_tracker.services.energy import estimate_energy, validate_profile


def test_metric_estimate() -> None:
    profile = BodyProfile(
        units="metric", sex="male", age=30, height_cm=180, weight_kg=80, goal="cut10"
    )

    estimate = estimate_energy(profile)

    assert estimate.bmr == pytest.approx(800 + 1125 - 150 + 5)
    assert estimate.tdee == pytest.approx(estimate.bmr * 1.55)
    assert estimate.target == pytest.approx(estimate.tdee * 0.9)


def test_us_units_convert() -> None:
    profile = BodyProfile(
        units="us", sex="female", age=40, height_ft=5, height_in=6, weight_lb=150
    )

    estimate = estimate_energy(profile)

    kg = 150 * 0.45359237
    cm = 5 * 30.48 + 6 * 2.54
    assert estimate.bmr == pytest.approx(10 * kg + 6.25 * cm - 200 - 161)
    assert estimate.target == pytest.approx(estimate.tdee)


def test_bmr_never_negative() -> None:
    assert estimate_energy(BodyProfile(units="metric", age=120)).bmr == 0


def test_validate_profile() -> None:
    errors = validate_profile(
        BodyProfile(units="us", age=0, height_ft=10, height_in=12, weight_lb=0)
    )

    assert errors == {
        "age": "Age must be greater than 0",
        "height_ft": "Height must be 9 feet or less",
        "height_in": "Inches must be less than 12",
        "weight_lb": "Weight must be greater than 0",
    }
    assert validate_profile(
        BodyProfile(units="metric", age=30, height_cm=170, weight_kg=70)
    ) == {}
