"""Services for user-defined custom foods."""

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from wellness_tracker.domain.custom_foods import CustomFood, CustomFoodDraft
from wellness_tracker.domain.log import LogItem
from wellness_tracker.domain.nutrition import NutrientSnapshot
from wellness_tracker.numeric import safe_number
from wellness_tracker.services.basis import build_basis
from wellness_tracker.services.food_log import FoodLogService
from wellness_tracker.services.user_settings import UserSettingsService

if TYPE_CHECKING:
    from wellness_tracker.services.favorites import FavoritesService

CUSTOM_BRAND = "Custom"
MAX_AMOUNT_G = 10000.0
MAX_CALORIES = 10000.0
MAX_NUTRIENT_G = 1000.0

_logger = logging.getLogger(__name__)


class CustomFoodRepository(Protocol):
    """Persistence interface for custom foods."""

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> CustomFood:
        """Create a custom food and return it."""

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        """Return a user's custom foods, newest first."""

    def get_food(self, user_id: UUID, food_id: UUID) -> CustomFood | None:
        """Return a custom food by id, if present."""

    def delete_food(self, user_id: UUID, food_id: UUID) -> None:
        """Delete a custom food."""


class CustomFoodValidationError(ValueError):
    """Raised when a custom food form has invalid fields."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{key}: {value}" for key, value in errors.items()))
        self.errors = errors


def validate_custom_food_draft(draft: CustomFoodDraft) -> dict[str, str]:
    """Return field errors for a custom food form; empty when it is valid."""
    errors: dict[str, str] = {}
    name = draft.name.strip()
    if not name:
        errors["name"] = "Food name is required"
    elif len(name) < 2:
        errors["name"] = "Name must be at least 2 characters"

    amount = _parse_field(draft.amount)
    if amount is None or amount <= 0:
        errors["amount"] = "Amount must be greater than 0"
    elif amount > MAX_AMOUNT_G:
        errors["amount"] = "Amount must be 10000g or less"

    calories = _parse_field(draft.calories)
    if calories is None or calories < 0:
        errors["calories"] = "Calories cannot be negative"
    elif calories > MAX_CALORIES:
        errors["calories"] = "Calories must be 10000 or less"

    for key, label in (("fiber", "Fiber"), ("protein", "Protein")):
        value = _parse_field(getattr(draft, key))
        if value is None or value < 0:
            errors[key] = f"{label} cannot be negative"
        elif value > MAX_NUTRIENT_G:
            errors[key] = f"{label} must be 1000g or less"
    return errors


def custom_food_to_log_item(food: CustomFood) -> LogItem:
    """Build a log item at the custom food's own amount."""
    snapshot = NutrientSnapshot(
        energy_kcal=food.calories_kcal,
        protein_g=food.protein_g,
        fat_g=food.fat_g,
        carbs_g=food.derived_carbs_g,
        micros={"fiber": food.fiber_g},
    )
    basis = build_basis(snapshot, food.amount_g)
    serving = max(0.0, food.amount_g)
    return LogItem(
        id=f"custom-{food.id}",
        name=food.name,
        brand=food.brand or CUSTOM_BRAND,
        serving_g=serving,
        nutrients=basis.scaled(serving),
        basis=basis,
        custom_food_id=food.id,
    )


@dataclass
class CustomFoodService:
    """Application service for custom foods."""

    repository: CustomFoodRepository
    food_log: FoodLogService
    favorites: "FavoritesService"
    settings: UserSettingsService

    def create(self, user_id: UUID, draft: CustomFoodDraft) -> CustomFood:
        """Validate a form, store the food and clear the saved draft."""
        errors = validate_custom_food_draft(draft)
        if errors:
            raise CustomFoodValidationError(errors)
        food = self.repository.create_food(
            user_id,
            {
                "name": draft.name.strip(),
                "brand": draft.brand.strip(),
                "amount": safe_number(draft.amount, 100.0),
                "calories": safe_number(draft.calories),
                "fiber": safe_number(draft.fiber),
                "protein": safe_number(draft.protein),
            },
        )
        self.settings.clear_draft(user_id)
        _logger.info("Custom food created: user_id=%s food_id=%s", user_id, food.id)
        return food

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        return self.repository.list_foods(user_id)

    def get(self, user_id: UUID, food_id: UUID) -> CustomFood | None:
        return self.repository.get_food(user_id, food_id)

    def delete(self, user_id: UUID, food_id: UUID) -> bool:
        """Delete a custom food along with its favorite mark and log items."""
        food = self.repository.get_food(user_id, food_id)
        if food is None:
            return False
        self.repository.delete_food(user_id, food_id)
        try:
            self.favorites.remove_custom(user_id, food_id)
        except Exception:
            _logger.exception(
                "Failed to remove favorite of custom food %s for user %s",
                food_id,
                user_id,
            )
        try:
            removed = self.food_log.remove_custom_food_items(user_id, food_id)
        except Exception:
            _logger.exception(
                "Failed to remove log items of custom food %s for user %s",
                food_id,
                user_id,
            )
            removed = 0
        _logger.info(
            "Custom food deleted: user_id=%s food_id=%s log_items_removed=%s",
            user_id,
            food_id,
            removed,
        )
        return True


def _parse_field(value: str) -> float | None:
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None
