"""Pydantic models for API request bodies."""

from typing import Literal

from pydantic import BaseModel

from wellness_tracker.domain.custom_foods import CustomFoodDraft
from wellness_tracker.domain.energy import BodyProfile


class BodyProfileRequest(BaseModel):
    """Energy calculator inputs."""

    units: Literal["us", "metric"] = "us"
    sex: Literal["male", "female"] = "male"
    age: float = 0.0
    height_ft: float = 0.0
    height_in: float = 0.0
    height_cm: float = 0.0
    weight_lb: float = 0.0
    weight_kg: float = 0.0
    activity: float = 1.55
    goal: Literal["maintain", "cut10", "cut20", "gain10", "gain20"] = "maintain"

    def to_profile(self) -> BodyProfile:
        return BodyProfile(**self.model_dump())


class ApiKeyUpdate(BaseModel):
    """New FoodData Central API key."""

    api_key: str


class CustomFoodForm(BaseModel):
    """Raw custom food form values, as typed."""

    name: str = ""
    brand: str = ""
    amount: str = "100"
    calories: str = ""
    fiber: str = ""
    protein: str = ""

    def to_draft(self) -> CustomFoodDraft:
        return CustomFoodDraft(**self.model_dump())


class SelectedEnergyUpdate(BaseModel):
    """Which energy figure the user is tracking against."""

    selected_energy: Literal["bmr", "tdee", "target"] | None = None


class AddRecordRequest(BaseModel):
    """A food to log: either a full lookup record or an FDC id to fetch."""

    record: dict[str, object] | None = None
    fdc_id: int | None = None


class AmountChange(BaseModel):
    """New serving for a log item."""

    grams: float | str
    apply_invalid: bool = False


class FavoriteToggle(BaseModel):
    """Lookup food to mark or unmark as a favorite."""

    fdc_id: int
    food_name: str
    record: dict[str, object] | None = None
