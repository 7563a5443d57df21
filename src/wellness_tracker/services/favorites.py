"""Favorite foods service."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.custom_foods import CustomFood
from wellness_tracker.domain.favorites import FavoriteEntry, FavoriteMark
from wellness_tracker.domain.log import LogItem
from wellness_tracker.services.custom_foods import CustomFoodRepository
from wellness_tracker.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


class FavoritesRepository(Protocol):
    """Persistence interface for favorite marks."""

    def list_marks(self, user_id: UUID) -> list[FavoriteMark]:
        """Return all favorite marks for a user."""

    def add_mark(self, mark: FavoriteMark) -> None:
        """Store a favorite mark."""

    def remove_by_fdc_id(self, user_id: UUID, fdc_id: int) -> None:
        """Delete the mark for an FDC food."""

    def remove_by_custom_food_id(self, user_id: UUID, custom_food_id: UUID) -> None:
        """Delete the mark for a custom food."""


@dataclass
class FavoritesService:
    """Marks foods as favorites and resolves marks back to foods.

    A food is identified by its FDC id or its custom food id, never by name.
    """

    repository: FavoritesRepository
    nutrition: NutritionService
    custom_foods: CustomFoodRepository

    def list_marks(self, user_id: UUID) -> list[FavoriteMark]:
        return self.repository.list_marks(user_id)

    def is_favorite(
        self,
        user_id: UUID,
        *,
        fdc_id: int | None = None,
        custom_food_id: UUID | None = None,
    ) -> bool:
        if fdc_id is None and custom_food_id is None:
            return False
        for mark in self.repository.list_marks(user_id):
            if fdc_id is not None and mark.fdc_id == fdc_id:
                return True
            if custom_food_id is not None and mark.custom_food_id == custom_food_id:
                return True
        return False

    def toggle_external(
        self,
        user_id: UUID,
        fdc_id: int,
        food_name: str,
        record: dict[str, object] | None = None,
    ) -> bool:
        """Toggle a lookup food and return whether it is now a favorite.

        A record passed in is cached so the favorite resolves without a fetch.
        """
        if self.is_favorite(user_id, fdc_id=fdc_id):
            self.repository.remove_by_fdc_id(user_id, fdc_id)
            _logger.info("Favorite removed: user_id=%s fdc_id=%s", user_id, fdc_id)
            return False
        self.repository.add_mark(
            FavoriteMark(user_id=user_id, food_name=food_name, fdc_id=fdc_id)
        )
        if record is not None:
            self.nutrition.cache.put(fdc_id, record)
        _logger.info("Favorite added: user_id=%s fdc_id=%s", user_id, fdc_id)
        return True

    def toggle_custom(self, user_id: UUID, food: CustomFood) -> bool:
        """Toggle a custom food and return whether it is now a favorite."""
        return self._toggle_custom_id(user_id, food.id, food.name)

    def toggle_item(self, user_id: UUID, item: LogItem) -> bool | None:
        """Toggle the food behind a log item.

        Returns None, changing nothing, when the item has no source id.
        """
        if item.fdc_id is not None:
            return self.toggle_external(user_id, item.fdc_id, item.name)
        if item.custom_food_id is not None:
            return self._toggle_custom_id(user_id, item.custom_food_id, item.name)
        _logger.warning("Cannot favorite log item %s without a source id", item.id)
        return None

    def _toggle_custom_id(
        self, user_id: UUID, custom_food_id: UUID, food_name: str
    ) -> bool:
        if self.is_favorite(user_id, custom_food_id=custom_food_id):
            self.remove_custom(user_id, custom_food_id)
            return False
        self.repository.add_mark(
            FavoriteMark(
                user_id=user_id, food_name=food_name, custom_food_id=custom_food_id
            )
        )
        _logger.info(
            "Favorite added: user_id=%s custom_food_id=%s", user_id, custom_food_id
        )
        return True

    def remove_custom(self, user_id: UUID, custom_food_id: UUID) -> None:
        self.repository.remove_by_custom_food_id(user_id, custom_food_id)
        _logger.info(
            "Favorite removed: user_id=%s custom_food_id=%s", user_id, custom_food_id
        )

    async def resolve(self, user_id: UUID, *, api_key: str) -> list[FavoriteEntry]:
        """Resolve every mark to its food.

        Lookup foods come from the record cache or a fetch; a mark whose food
        cannot be found is returned unrenderable.
        """
        marks = self.repository.list_marks(user_id)
        custom_by_id: dict[UUID, CustomFood] | None = None
        entries: list[FavoriteEntry] = []
        for mark in marks:
            if mark.fdc_id is not None:
                record = await self.nutrition.fetch_by_id(
                    mark.fdc_id, api_key=api_key
                )
                entries.append(FavoriteEntry(mark=mark, record=record))
                continue
            if custom_by_id is None:
                custom_by_id = {
                    food.id: food for food in self.custom_foods.list_foods(user_id)
                }
            entries.append(
                FavoriteEntry(
                    mark=mark, custom_food=custom_by_id.get(mark.custom_food_id)
                )
            )
        unresolved = sum(1 for entry in entries if not entry.renderable)
        if unresolved:
            _logger.info(
                "Favorites unresolved: user_id=%s count=%s", user_id, unresolved
            )
        return entries
