"""Nutrient extraction from raw FoodData Central records.

Records arrive in several shapes: search results carry flat
``nutrientId``/``nutrientName``/``value`` entries, food details carry nested
``nutrient`` objects with an ``amount``, and branded foods may add a flat
``labelNutrients`` object. Each nutrient is resolved through a fixed chain of
lookups (FDC id, then name substring, then label key); the first non-zero
value wins.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from wellness_tracker.domain.nutrition import (
    MICRO_KEYS,
    FoodSummary,
    NutrientSnapshot,
)
from wellness_tracker.numeric import safe_number, tidy_text

_logger = logging.getLogger(__name__)

DEFAULT_BASIS_GRAMS = 100.0


@dataclass(frozen=True)
class NutrientEntry:
    """One item of a record's ``foodNutrients`` list."""

    nutrient_id: int | None
    number: str | None
    name: str
    unit: str | None
    amount: float

    def matches_id(self, nutrient_id: int) -> bool:
        return self.nutrient_id == nutrient_id or self.number == str(nutrient_id)


@dataclass(frozen=True)
class ParsedFoodRecord:
    """A raw record reduced to its nutrient entries and label nutrients."""

    entries: tuple[NutrientEntry, ...]
    label: Mapping[str, object]


class NutrientLookup(Protocol):
    """A single strategy for finding a nutrient value in a record."""

    def lookup(self, record: ParsedFoodRecord) -> float | None:
        """Return the value if this strategy finds one."""


@dataclass(frozen=True)
class IdLookup(NutrientLookup):
    """Match entries by FDC nutrient id or nutrient number."""

    nutrient_ids: tuple[int, ...]

    def lookup(self, record: ParsedFoodRecord) -> float | None:
        for nutrient_id in self.nutrient_ids:
            for entry in record.entries:
                if entry.matches_id(nutrient_id):
                    return entry.amount
        return None


@dataclass(frozen=True)
class NameLookup(NutrientLookup):
    """Match entries whose name contains a known variant, in priority order."""

    names: tuple[str, ...]
    excluded_units: frozenset[str] = frozenset()

    def lookup(self, record: ParsedFoodRecord) -> float | None:
        for candidate in self.names:
            needle = candidate.lower()
            for entry in record.entries:
                if (entry.unit or "").lower() in self.excluded_units:
                    continue
                if needle in entry.name.lower():
                    return entry.amount
        return None


@dataclass(frozen=True)
class LabelLookup(NutrientLookup):
    """Read a flat label nutrient, given as a number or ``{"value": n}``."""

    keys: tuple[str, ...]

    def lookup(self, record: ParsedFoodRecord) -> float | None:
        for key in self.keys:
            value = _label_value(record.label.get(key))
            if value:
                return value
        return None


@dataclass(frozen=True)
class NutrientChain:
    """Ordered lookups; a missing or zero value falls through to the next."""

    lookups: tuple[NutrientLookup, ...]

    def resolve(self, record: ParsedFoodRecord) -> float:
        for strategy in self.lookups:
            value = strategy.lookup(record)
            if value:
                return value
        return 0.0


def _chain(
    ids: tuple[int, ...],
    names: tuple[str, ...],
    label_keys: tuple[str, ...],
    excluded_units: frozenset[str] = frozenset(),
) -> NutrientChain:
    return NutrientChain(
        (
            IdLookup(ids),
            NameLookup(names, excluded_units),
            LabelLookup(label_keys),
        )
    )


ENERGY = _chain(
    (1008,),
    ("energy (atwater general factors)", "energy"),
    ("calories",),
    excluded_units=frozenset({"kj"}),
)
PROTEIN = _chain((1003,), ("protein",), ("protein",))
FAT = _chain((1004,), ("total lipid (fat)", "total fat"), ("fat",))
CARBS = _chain(
    (1005,),
    ("carbohydrate, by difference", "carbohydrate"),
    ("carbohydrates", "carbohydrate"),
)

MICRO_CHAINS: dict[str, NutrientChain] = {
    "fiber": _chain(
        (1079,), ("fiber", "dietary fiber", "total dietary fiber"), ("fiber",)
    ),
    "sugar": _chain((2000, 1063), ("sugars", "sugars, total", "sugar"), ("sugars",)),
    "satfat": _chain(
        (1258,),
        ("saturated fat", "fatty acids, total saturated", "saturatedfat"),
        ("saturatedFat",),
    ),
    "sodium": _chain((1093,), ("sodium",), ("sodium",)),
    "cholesterol": _chain((1253,), ("cholesterol",), ("cholesterol",)),
}


def parse_record(record: Mapping[str, object] | None) -> ParsedFoodRecord:
    """Reduce a raw record to explicit entry and label types."""
    if record is None:
        record = {}
    raw_entries = record.get("foodNutrients")
    entries = tuple(
        _parse_entry(raw)
        for raw in (raw_entries if isinstance(raw_entries, list) else [])
        if isinstance(raw, Mapping)
    )
    label = record.get("labelNutrients")
    return ParsedFoodRecord(
        entries=entries, label=label if isinstance(label, Mapping) else {}
    )


def extract_nutrients(
    record: Mapping[str, object] | None, basis_grams: float = DEFAULT_BASIS_GRAMS
) -> NutrientSnapshot:
    """Extract macros and micros from a raw record, scaled to ``basis_grams``.

    Raw values are read as per 100 g. A record that cannot be parsed yields
    the zero snapshot instead of an error.
    """
    try:
        parsed = parse_record(record)
        scale = safe_number(basis_grams) / DEFAULT_BASIS_GRAMS
        return NutrientSnapshot(
            energy_kcal=ENERGY.resolve(parsed) * scale,
            protein_g=PROTEIN.resolve(parsed) * scale,
            fat_g=FAT.resolve(parsed) * scale,
            carbs_g=CARBS.resolve(parsed) * scale,
            micros={
                key: MICRO_CHAINS[key].resolve(parsed) * scale for key in MICRO_KEYS
            },
        )
    except Exception as exc:
        _logger.debug("Unparseable food record, using zero nutrition: %s", exc)
        return NutrientSnapshot.zero()


def summarize_record(record: Mapping[str, object]) -> FoodSummary:
    """Return the display fields of a raw record."""
    fdc_id = record.get("fdcId") or record.get("FdcId")
    brand = tidy_text(
        record.get("brandOwner") or record.get("brandName") or record.get("dataType")
    )
    return FoodSummary(
        fdc_id=parse_int_id(fdc_id),
        description=tidy_text(
            record.get("description") or record.get("lowercaseDescription") or "Food"
        ),
        brand=brand or None,
        data_type=record.get("dataType"),
    )


def _parse_entry(raw: Mapping[str, object]) -> NutrientEntry:
    nested = raw.get("nutrient")
    nutrient = nested if isinstance(nested, Mapping) else {}
    nutrient_id = raw.get("nutrientId")
    if nutrient_id is None:
        nutrient_id = nutrient.get("id")
    number = raw.get("nutrientNumber") or nutrient.get("number")
    amount = raw.get("amount")
    if amount is None:
        amount = raw.get("value")
    return NutrientEntry(
        nutrient_id=parse_int_id(nutrient_id),
        number=str(number) if number is not None else None,
        name=str(raw.get("nutrientName") or nutrient.get("name") or ""),
        unit=str(raw.get("unitName") or nutrient.get("unitName") or "") or None,
        amount=safe_number(amount),
    )


def _label_value(value: object) -> float:
    if isinstance(value, bool) or not value:
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, Mapping) and isinstance(value.get("value"), int | float):
        return float(value["value"])
    return 0.0


def parse_int_id(value: object) -> int | None:
    """Return an integer identifier from an int or a digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
