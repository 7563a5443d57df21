"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.custom_foods import CustomFoodDraft
from wellness_tracker.domain.settings import UserSettings
from wellness_tracker.services.user_settings import (
    SELECTED_ENERGY_VALUES,
    UserSettingsRepository,
)

_DRAFT_FIELDS = ("name", "brand", "amount", "calories", "fiber", "protein")


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        """Return the stored settings row for a user."""
        response = (
            self.client.table("user_settings")
            .select(
                "fdc_api_key, search_results, total_results, custom_food_draft, "
                "selected_energy"
            )
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_settings(user_id, response.data[0])

    def create_settings(self, user_id: UUID) -> UserSettings:
        """Insert an empty settings row."""
        self.client.table("user_settings").insert(
            {"user_id": str(user_id), "fdc_api_key": "", "search_results": []}
        ).execute()
        return UserSettings(user_id=user_id)

    def update_settings(self, user_id: UUID, payload: dict[str, object]) -> None:
        """Update columns of the user's settings row."""
        self.client.table("user_settings").update(
            {**payload, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("user_id", str(user_id)).execute()


def _parse_settings(user_id: UUID, row: dict[str, object]) -> UserSettings:
    """Parse a settings row into a domain model."""
    results = row.get("search_results")
    draft = row.get("custom_food_draft")
    selected = row.get("selected_energy")
    return UserSettings(
        user_id=user_id,
        fdc_api_key=str(row.get("fdc_api_key") or ""),
        search_results=[item for item in results if isinstance(item, dict)]
        if isinstance(results, list)
        else [],
        total_results=int(row.get("total_results") or 0),
        custom_food_draft=_parse_draft(draft),
        selected_energy=selected if selected in SELECTED_ENERGY_VALUES else None,
    )


def _parse_draft(raw: object) -> CustomFoodDraft:
    if not isinstance(raw, dict) or not raw:
        return CustomFoodDraft()
    values = {key: str(raw[key]) for key in _DRAFT_FIELDS if raw.get(key) is not None}
    return CustomFoodDraft(**values)
