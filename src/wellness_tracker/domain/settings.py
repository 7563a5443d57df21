"""Domain models for per-user settings."""

from dataclasses import dataclass, field
from typing import Literal
from uuid import UUID

from wellness_tracker.domain.custom_foods import CustomFoodDraft

SelectedEnergy = Literal["bmr", "tdee", "target"]


@dataclass(frozen=True)
class UserSettings:
    """Stored settings and saved UI state for one user."""

    user_id: UUID
    fdc_api_key: str = ""
    search_results: list[dict[str, object]] = field(default_factory=list)
    total_results: int = 0
    custom_food_draft: CustomFoodDraft = field(default_factory=CustomFoodDraft)
    selected_energy: SelectedEnergy | None = None
