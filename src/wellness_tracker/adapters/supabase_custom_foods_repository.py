"""Supabase repository for custom foods."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.custom_foods import CustomFood
from wellness_tracker.services.custom_foods import CustomFoodRepository


@dataclass
class SupabaseCustomFoodRepository(CustomFoodRepository):
    """Supabase-backed repository for custom foods."""

    client: Client

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> CustomFood:
        """Create a custom food and return it."""
        response = (
            self.client.table("custom_foods")
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create custom food")
        return _parse_food(response.data[0])

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        """Return a user's custom foods, newest first."""
        response = (
            self.client.table("custom_foods")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def get_food(self, user_id: UUID, food_id: UUID) -> CustomFood | None:
        """Return a custom food by id, if present."""
        response = (
            self.client.table("custom_foods")
            .select("*")
            .eq("id", str(food_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def delete_food(self, user_id: UUID, food_id: UUID) -> None:
        """Delete a custom food."""
        self.client.table("custom_foods").delete().eq("id", str(food_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_food(row: dict[str, object]) -> CustomFood:
    """Parse a custom food row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return CustomFood(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        brand=str(row.get("brand") or ""),
        amount_g=float(row.get("amount", 100.0)),
        calories_kcal=float(row.get("calories", 0.0)),
        fiber_g=float(row.get("fiber", 0.0)),
        protein_g=float(row.get("protein", 0.0)),
        created_at=created_at,
    )
