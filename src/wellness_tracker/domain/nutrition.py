"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

MICRO_KEYS = ("fiber", "sugar", "satfat", "sodium", "cholesterol")


def _frozen_micros(micros: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({key: float(value) for key, value in micros.items()})


@dataclass(frozen=True)
class NutrientSnapshot:
    """Absolute nutrient quantities for some known mass of food."""

    energy_kcal: float
    protein_g: float
    fat_g: float
    carbs_g: float
    micros: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "micros", _frozen_micros(self.micros))

    @classmethod
    def zero(cls) -> "NutrientSnapshot":
        """Return the snapshot used for records without usable nutrition."""
        return cls(energy_kcal=0.0, protein_g=0.0, fat_g=0.0, carbs_g=0.0)

    def micro(self, key: str) -> float:
        """Return a micronutrient amount, zero when absent."""
        return self.micros.get(key, 0.0)

    def to_dict(self) -> dict[str, object]:
        """Serialize using the stored row field names."""
        return {
            "energy": self.energy_kcal,
            "protein": self.protein_g,
            "fat": self.fat_g,
            "carbs": self.carbs_g,
            "micros": dict(self.micros),
        }


@dataclass(frozen=True)
class NutrientBasisPerGram:
    """Nutrient quantities in exactly one gram of a food.

    The basis is the only source for rescaling a serving: every new amount is
    multiplied fresh from these values, so repeated edits never accumulate
    rounding.
    """

    energy_kcal: float
    protein_g: float
    fat_g: float
    carbs_g: float
    micros: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "micros", _frozen_micros(self.micros))

    def scaled(self, grams: float) -> NutrientSnapshot:
        """Return absolute nutrients for the given mass."""
        return NutrientSnapshot(
            energy_kcal=self.energy_kcal * grams,
            protein_g=self.protein_g * grams,
            fat_g=self.fat_g * grams,
            carbs_g=self.carbs_g * grams,
            micros={key: value * grams for key, value in self.micros.items()},
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize in the ``base_per_g`` row shape."""
        return {
            "energy": self.energy_kcal,
            "protein": self.protein_g,
            "fat": self.fat_g,
            "carbs": self.carbs_g,
            "micros": dict(self.micros),
        }


@dataclass(frozen=True)
class FoodSummary:
    """Display fields of a food-composition record."""

    fdc_id: int | None
    description: str
    brand: str | None
    data_type: str | None


@dataclass(frozen=True)
class SearchPage:
    """One page of food search results."""

    records: list[dict[str, object]]
    total_count: int
