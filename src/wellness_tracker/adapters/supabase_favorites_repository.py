"""Supabase repository for favorite foods."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from wellness_tracker.domain.favorites import FavoriteMark
from wellness_tracker.services.favorites import FavoritesRepository


@dataclass
class SupabaseFavoritesRepository(FavoritesRepository):
    """Supabase implementation for favorite marks."""

    client: Client

    def list_marks(self, user_id: UUID) -> list[FavoriteMark]:
        """Return all favorite marks for a user."""
        response = (
            self.client.table("favorites")
            .select("food_name, fdc_id, custom_food_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        marks = []
        for row in response.data or []:
            fdc_id = row.get("fdc_id")
            custom_food_id = row.get("custom_food_id")
            if fdc_id is None and custom_food_id is None:
                continue
            marks.append(
                FavoriteMark(
                    user_id=user_id,
                    food_name=str(row.get("food_name") or ""),
                    fdc_id=int(fdc_id) if fdc_id is not None else None,
                    custom_food_id=(
                        UUID(str(custom_food_id)) if fdc_id is None else None
                    ),
                )
            )
        return marks

    def add_mark(self, mark: FavoriteMark) -> None:
        """Insert a favorite mark."""
        self.client.table("favorites").insert(
            {
                "user_id": str(mark.user_id),
                "food_name": mark.food_name,
                "fdc_id": mark.fdc_id,
                "custom_food_id": (
                    str(mark.custom_food_id) if mark.custom_food_id else None
                ),
            }
        ).execute()

    def remove_by_fdc_id(self, user_id: UUID, fdc_id: int) -> None:
        """Delete the mark for an FDC food."""
        self.client.table("favorites").delete().eq("user_id", str(user_id)).eq(
            "fdc_id", fdc_id
        ).execute()

    def remove_by_custom_food_id(self, user_id: UUID, custom_food_id: UUID) -> None:
        """Delete the mark for a custom food."""
        self.client.table("favorites").delete().eq("user_id", str(user_id)).eq(
            "custom_food_id", str(custom_food_id)
        ).execute()
