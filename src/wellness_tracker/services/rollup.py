"""Food log totals."""

from collections.abc import Iterable
from dataclasses import dataclass

from wellness_tracker.domain.log import LogItem
from wellness_tracker.services.wellness import WellnessReport, assess, item_calories


@dataclass(frozen=True)
class AggregateTotals:
    """Summed mass and nutrients of a food log."""

    mass_g: float
    calories_kcal: float
    protein_g: float
    fiber_g: float


def rollup(items: Iterable[LogItem]) -> AggregateTotals:
    """Fold the log into totals, starting from zero on every call."""
    mass = calories = protein = fiber = 0.0
    for item in items:
        mass += max(0.0, item.serving_g)
        calories += item_calories(item)
        protein += item.nutrients.protein_g
        fiber += item.fiber_g
    return AggregateTotals(
        mass_g=mass, calories_kcal=calories, protein_g=protein, fiber_g=fiber
    )


def assess_totals(totals: AggregateTotals) -> WellnessReport:
    return assess(totals.calories_kcal, totals.fiber_g, totals.protein_g, totals.mass_g)
