"""User settings service."""

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from wellness_tracker.domain.custom_foods import CustomFoodDraft
from wellness_tracker.domain.settings import SelectedEnergy, UserSettings
from wellness_tracker.services.debounce import DebouncedWriter

SELECTED_ENERGY_VALUES = ("bmr", "tdee", "target")

_logger = logging.getLogger(__name__)


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        """Return the user's settings row if it exists."""

    def create_settings(self, user_id: UUID) -> UserSettings:
        """Create an empty settings row and return it."""

    def update_settings(self, user_id: UUID, payload: dict[str, object]) -> None:
        """Update columns of the user's settings row."""


def validate_api_key(value: str) -> str:
    """Return a field error for an API key, or an empty string."""
    if not value.strip():
        return "API key is required to search"
    return ""


@dataclass
class UserSettingsService:
    """Service for user settings and saved UI state.

    Keystroke-driven fields are written through the debounced writer; the
    in-memory copy always reflects the latest value.
    """

    repository: UserSettingsRepository
    writer: DebouncedWriter
    default_api_key: str = ""
    _settings: dict[UUID, UserSettings] = field(default_factory=dict)

    def load(self, user_id: UUID) -> UserSettings:
        """Return the user's settings, creating an empty row when missing.

        When the store cannot be read, empty settings are returned and the
        load is retried on the next call.
        """
        cached = self._settings.get(user_id)
        if cached is not None:
            return cached
        try:
            settings = self.repository.get_settings(user_id)
            if settings is None:
                _logger.info("Creating settings row for user %s", user_id)
                settings = self.repository.create_settings(user_id)
        except Exception:
            _logger.exception("Failed to load settings for user %s", user_id)
            return UserSettings(user_id=user_id)
        self._settings[user_id] = settings
        return settings

    def api_key(self, user_id: UUID) -> str:
        """Return the user's FDC key, falling back to the configured default."""
        return self.load(user_id).fdc_api_key or self.default_api_key

    def save_api_key(self, user_id: UUID, api_key: str) -> str:
        """Save an API key; an empty key is rejected and nothing is written."""
        error = validate_api_key(api_key)
        if error:
            return error
        key = api_key.strip()
        self._update(user_id, fdc_api_key=key)
        self._schedule(user_id, "fdc_api_key", {"fdc_api_key": key})
        return ""

    def save_search_results(
        self, user_id: UUID, records: list[dict[str, object]], total_results: int
    ) -> None:
        self._update(user_id, search_results=list(records), total_results=total_results)
        self._schedule(
            user_id,
            "search_results",
            {"search_results": list(records), "total_results": total_results},
        )

    def save_draft(self, user_id: UUID, draft: CustomFoodDraft) -> None:
        self._update(user_id, custom_food_draft=draft)
        self._schedule(
            user_id, "custom_food_draft", {"custom_food_draft": draft.to_dict()}
        )

    def clear_draft(self, user_id: UUID) -> None:
        """Drop any pending draft write and store an empty draft now."""
        self.writer.cancel(_write_key(user_id, "custom_food_draft"))
        self._update(user_id, custom_food_draft=CustomFoodDraft())
        self._write_now(user_id, {"custom_food_draft": {}})

    def save_selected_energy(
        self, user_id: UUID, selected: SelectedEnergy | None
    ) -> None:
        if selected is not None and selected not in SELECTED_ENERGY_VALUES:
            raise ValueError(f"Unknown energy selection: {selected}")
        self._update(user_id, selected_energy=selected)
        self._write_now(user_id, {"selected_energy": selected})

    def _update(self, user_id: UUID, **changes: object) -> None:
        updated = replace(self.load(user_id), **changes)
        # Only loaded settings are cached; a failed load is retried later.
        if user_id in self._settings:
            self._settings[user_id] = updated

    def _write_now(self, user_id: UUID, payload: dict[str, object]) -> None:
        try:
            self.repository.update_settings(user_id, payload)
        except Exception:
            _logger.exception(
                "Failed to save settings %s for user %s", sorted(payload), user_id
            )

    def _schedule(self, user_id: UUID, column: str, payload: dict[str, object]) -> None:
        self.writer.schedule(
            _write_key(user_id, column),
            lambda: self.repository.update_settings(user_id, payload),
        )


def _write_key(user_id: UUID, column: str) -> str:
    return f"settings:{column}:{user_id}"
