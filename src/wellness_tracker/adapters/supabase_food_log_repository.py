"""Supabase repository for the food log."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.log import LogItem
from wellness_tracker.services.food_log import FoodLogRepository, restore_log_item


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for the food log.

    Only the name, amount, per-gram basis and source ids are stored; derived
    nutrients are recomputed on load.
    """

    client: Client

    def list_items(self, user_id: UUID) -> list[LogItem]:
        """Return the stored log in display order."""
        response = (
            self.client.table("food_log")
            .select("id, name, amount, base_per_g, fdc_id, custom_food_id")
            .eq("user_id", str(user_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def replace_items(self, user_id: UUID, items: list[LogItem]) -> None:
        """Delete the user's rows and insert the current log."""
        self.client.table("food_log").delete().eq("user_id", str(user_id)).execute()
        if not items:
            return
        payload = [
            {
                "user_id": str(user_id),
                "name": item.name,
                "amount": item.serving_g,
                "base_per_g": item.basis.to_dict(),
                "fdc_id": item.fdc_id,
                "custom_food_id": (
                    str(item.custom_food_id) if item.custom_food_id else None
                ),
            }
            for item in items
        ]
        self.client.table("food_log").insert(payload).execute()


def _parse_item(row: dict[str, object]) -> LogItem:
    """Parse a food log row into a log item."""
    return restore_log_item(
        {
            "id": row.get("id"),
            "name": row.get("name"),
            "serving": row.get("amount"),
            "base_per_g": row.get("base_per_g"),
            "fdc_id": row.get("fdc_id"),
            "custom_food_id": row.get("custom_food_id"),
        }
    )
