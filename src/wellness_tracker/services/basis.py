"""Per-gram nutrient basis construction."""

import math
from collections.abc import Mapping

from wellness_tracker.domain.nutrition import NutrientBasisPerGram, NutrientSnapshot
from wellness_tracker.numeric import safe_number
from wellness_tracker.services.extraction import DEFAULT_BASIS_GRAMS, extract_nutrients

GRAM_UNITS = frozenset({"g", "grm", "gram", "grams"})


def declared_serving_grams(record: Mapping[str, object]) -> float:
    """Return the record's serving size when it is a positive gram amount, else 100."""
    size = safe_number(record.get("servingSize"))
    unit = str(record.get("servingSizeUnit") or "").strip().lower()
    if size > 0 and unit in GRAM_UNITS:
        return size
    return DEFAULT_BASIS_GRAMS


def build_basis(
    snapshot: NutrientSnapshot, reference_grams: float
) -> NutrientBasisPerGram:
    """Divide a snapshot by the mass it represents, floored at one gram."""
    denominator = max(safe_number(reference_grams), 1.0)
    return NutrientBasisPerGram(
        energy_kcal=snapshot.energy_kcal / denominator,
        protein_g=snapshot.protein_g / denominator,
        fat_g=snapshot.fat_g / denominator,
        carbs_g=snapshot.carbs_g / denominator,
        micros={key: value / denominator for key, value in snapshot.micros.items()},
    )


def basis_from_record(
    record: Mapping[str, object],
) -> tuple[NutrientBasisPerGram, float]:
    """Build the per-gram basis of a raw record and return it with its serving."""
    serving = (
        declared_serving_grams(record)
        if isinstance(record, Mapping)
        else DEFAULT_BASIS_GRAMS
    )
    snapshot = extract_nutrients(record, serving)
    return build_basis(snapshot, serving), serving


def stored_basis(row: Mapping[str, object]) -> NutrientBasisPerGram | None:
    """Return the basis a row already carries, if it is usable."""
    stored = row.get("basis")
    if stored is None:
        stored = row.get("base_per_g")
    if isinstance(stored, NutrientBasisPerGram):
        return stored
    if not isinstance(stored, Mapping):
        return None
    energy = stored.get("energy")
    if isinstance(energy, bool) or not isinstance(energy, int | float):
        return None
    if not math.isfinite(energy):
        return None
    return NutrientBasisPerGram(
        energy_kcal=float(energy),
        protein_g=safe_number(stored.get("protein")),
        fat_g=safe_number(stored.get("fat")),
        carbs_g=safe_number(stored.get("carbs")),
        micros=_numeric_micros(stored.get("micros")),
    )


def ensure_basis(row: Mapping[str, object]) -> NutrientBasisPerGram:
    """Reuse a row's basis, or synthesize one from its absolute fields."""
    existing = stored_basis(row)
    if existing is not None:
        return existing
    serving = safe_number(row.get("serving"), DEFAULT_BASIS_GRAMS)
    snapshot = NutrientSnapshot(
        energy_kcal=safe_number(row.get("energy")),
        protein_g=safe_number(row.get("protein")),
        fat_g=safe_number(row.get("fat")),
        carbs_g=safe_number(row.get("carbs")),
        micros=_numeric_micros(row.get("micros")),
    )
    return build_basis(snapshot, serving)


def _numeric_micros(value: object) -> dict[str, float]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): safe_number(amount) for key, amount in value.items()}
