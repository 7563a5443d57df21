"""Domain models for user-defined foods."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class CustomFood:
    """A food entered by hand with minimal nutrition data.

    Only calories, fiber and protein are recorded. Fat is modelled as zero and
    carbohydrate is whatever energy protein does not account for.
    """

    id: UUID
    user_id: UUID
    name: str
    brand: str
    amount_g: float
    calories_kcal: float
    fiber_g: float
    protein_g: float
    created_at: datetime | None = None

    @property
    def fat_g(self) -> float:
        return 0.0

    @property
    def derived_carbs_g(self) -> float:
        return max(0.0, self.calories_kcal - self.protein_g * 4) / 4


@dataclass(frozen=True)
class CustomFoodDraft:
    """Raw form values of a custom food being entered."""

    name: str = ""
    brand: str = ""
    amount: str = "100"
    calories: str = ""
    fiber: str = ""
    protein: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "brand": self.brand,
            "amount": self.amount,
            "calories": self.calories,
            "fiber": self.fiber,
            "protein": self.protein,
        }
