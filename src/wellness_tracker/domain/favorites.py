"""Domain models for favorite foods."""

from dataclasses import dataclass
from uuid import UUID

from wellness_tracker.domain.custom_foods import CustomFood


@dataclass(frozen=True)
class FavoriteMark:
    """A user's favorite, keyed by exactly one of an FDC id or a custom food id."""

    user_id: UUID
    food_name: str
    fdc_id: int | None = None
    custom_food_id: UUID | None = None

    def __post_init__(self) -> None:
        if (self.fdc_id is None) == (self.custom_food_id is None):
            raise ValueError("A favorite needs exactly one of fdc_id or custom_food_id")
        object.__setattr__(self, "food_name", normalize_food_name(self.food_name))

    @property
    def is_custom(self) -> bool:
        return self.custom_food_id is not None


@dataclass(frozen=True)
class FavoriteEntry:
    """A favorite resolved against its food record, if it could be found."""

    mark: FavoriteMark
    record: dict[str, object] | None = None
    custom_food: CustomFood | None = None

    @property
    def renderable(self) -> bool:
        return self.record is not None or self.custom_food is not None


def normalize_food_name(name: str) -> str:
    return name.strip().lower()
