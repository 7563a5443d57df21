"""Tests for wellness factors and rollups."""

import math

import pytest

from tests.conftest import OATS_RECORD
from wellness_tracker.services.food_log import create_log_item, set_amount
from wellness_tracker.services.rollup import assess_totals, rollup
from wellness_tracker.services.wellness import (
    assess,
    assess_item,
    assess_record,
    energy_factor,
    fiber_factor,
    macro_calories,
    protein_factor,
    wellness_factor,
)


def test_factor_arithmetic() -> None:
    assert fiber_factor(100, 0) == math.inf
    assert fiber_factor(100, 50) == 2
    assert protein_factor(90, 3) == 30
    assert energy_factor(100, 0) == math.inf
    assert energy_factor(150, 100) == 1.5
    assert wellness_factor(20, 30) == 50
    assert wellness_factor(math.inf, 30) == math.inf


def test_macro_calories() -> None:
    assert macro_calories(10, 5, 20) == 165


def test_report_badges_and_favorability() -> None:
    report = assess(calories=150, fiber_g=5, protein_g=10, mass_g=100)

    assert report.wellness_factor == 45
    assert report.favorable is True
    assert report.formatted() == {"FF": "30", "PF": "15", "WF": "45", "EF": "1.5"}
    badges = {badge.label: badge for badge in report.badges()}
    assert badges["FF"].ok is True
    assert badges["EF"].ok is False


def test_zero_fiber_is_unfavorable() -> None:
    report = assess(calories=200, fiber_g=0, protein_g=10, mass_g=100)

    assert report.formatted()["FF"] == "∞"
    assert report.formatted()["WF"] == "∞"
    assert report.favorable is False


def test_assess_item_uses_serving_mass() -> None:
    item = set_amount(create_log_item(OATS_RECORD), 40)

    report = assess_item(item)

    calories = macro_calories(16.9 * 0.4, 6.9 * 0.4, 66.3 * 0.4)
    assert report.energy_factor == pytest.approx(calories / 40)


def test_assess_record_previews_100_grams() -> None:
    report = assess_record(OATS_RECORD)

    assert report.energy_factor == pytest.approx(
        macro_calories(16.9, 6.9, 66.3) / 100
    )


def test_rollup_of_empty_log_is_zero() -> None:
    totals = rollup([])

    assert (totals.mass_g, totals.calories_kcal, totals.protein_g, totals.fiber_g) == (
        0,
        0,
        0,
        0,
    )
    assert assess_totals(totals).energy_factor == math.inf


def test_rollup_sums_items() -> None:
    item = create_log_item(OATS_RECORD)

    totals = rollup([item, set_amount(item, 50)])

    assert totals.mass_g == 150
    assert totals.fiber_g == pytest.approx(15.9)
    assert totals.protein_g == pytest.approx(25.35)
