"""Wellness factor arithmetic.

Every factor is a calorie ratio. A zero denominator is a legitimate outcome
and yields ``math.inf``, displayed as ``∞``.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from wellness_tracker.domain.log import LogItem
from wellness_tracker.numeric import format_factor, safe_number
from wellness_tracker.services.extraction import DEFAULT_BASIS_GRAMS, extract_nutrients

FIBER_FACTOR_THRESHOLD = 50.0
PROTEIN_FACTOR_THRESHOLD = 30.0
WELLNESS_FACTOR_THRESHOLD = 80.0
ENERGY_FACTOR_THRESHOLD = 1.0


def fiber_factor(calories: float, fiber_g: float) -> float:
    return calories / fiber_g if fiber_g > 0 else math.inf


def protein_factor(calories: float, protein_g: float) -> float:
    return calories / protein_g if protein_g > 0 else math.inf


def wellness_factor(fiber: float, protein: float) -> float:
    if math.isfinite(fiber) and math.isfinite(protein):
        return fiber + protein
    return math.inf


def energy_factor(calories: float, mass_g: float) -> float:
    return calories / mass_g if mass_g > 0 else math.inf


def macro_calories(protein_g: float, fat_g: float, carbs_g: float) -> float:
    """Atwater calories: 4 kcal/g protein and carbohydrate, 9 kcal/g fat."""
    return (
        safe_number(protein_g) * 4 + safe_number(fat_g) * 9 + safe_number(carbs_g) * 4
    )


@dataclass(frozen=True)
class FactorBadge:
    """One factor prepared for display."""

    label: str
    value: float
    threshold: float
    text: str

    @property
    def ok(self) -> bool:
        return self.value < self.threshold


@dataclass(frozen=True)
class WellnessReport:
    """The four factors of a food or of a whole log."""

    fiber_factor: float
    protein_factor: float
    wellness_factor: float
    energy_factor: float

    @property
    def favorable(self) -> bool:
        return self.wellness_factor < WELLNESS_FACTOR_THRESHOLD

    def badges(self) -> list[FactorBadge]:
        return [
            FactorBadge(
                "FF",
                self.fiber_factor,
                FIBER_FACTOR_THRESHOLD,
                format_factor(self.fiber_factor),
            ),
            FactorBadge(
                "PF",
                self.protein_factor,
                PROTEIN_FACTOR_THRESHOLD,
                format_factor(self.protein_factor),
            ),
            FactorBadge(
                "WF",
                self.wellness_factor,
                WELLNESS_FACTOR_THRESHOLD,
                format_factor(self.wellness_factor),
            ),
            FactorBadge(
                "EF",
                self.energy_factor,
                ENERGY_FACTOR_THRESHOLD,
                format_factor(self.energy_factor, is_energy_factor=True),
            ),
        ]

    def formatted(self) -> dict[str, str]:
        """Return the display strings keyed by factor label."""
        return {badge.label: badge.text for badge in self.badges()}


def assess(
    calories: float, fiber_g: float, protein_g: float, mass_g: float
) -> WellnessReport:
    """Compute all four factors for already-scaled quantities."""
    fiber = fiber_factor(calories, fiber_g)
    protein = protein_factor(calories, protein_g)
    return WellnessReport(
        fiber_factor=fiber,
        protein_factor=protein,
        wellness_factor=wellness_factor(fiber, protein),
        energy_factor=energy_factor(calories, mass_g),
    )


def item_calories(item: LogItem) -> float:
    nutrients = item.nutrients
    return macro_calories(nutrients.protein_g, nutrients.fat_g, nutrients.carbs_g)


def assess_item(item: LogItem) -> WellnessReport:
    """Assess one logged food at its current serving."""
    return assess(
        item_calories(item),
        item.fiber_g,
        item.nutrients.protein_g,
        max(0.0, item.serving_g),
    )


def assess_record(record: Mapping[str, object]) -> WellnessReport:
    """Assess 100 g of a raw search result."""
    snapshot = extract_nutrients(record, DEFAULT_BASIS_GRAMS)
    return assess(
        macro_calories(snapshot.protein_g, snapshot.fat_g, snapshot.carbs_g),
        snapshot.micro("fiber"),
        snapshot.protein_g,
        DEFAULT_BASIS_GRAMS,
    )
