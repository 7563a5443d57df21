"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import httpx
import pytest

from wellness_tracker.adapters.fdc_client import FdcClient
from wellness_tracker.config import Settings
from wellness_tracker.containers import AppContainer
from wellness_tracker.domain.custom_foods import CustomFood
from wellness_tracker.domain.favorites import FavoriteMark
from wellness_tracker.domain.log import LogItem
from wellness_tracker.domain.settings import UserSettings
from wellness_tracker.services.cache import InMemoryFoodRecordCache
from wellness_tracker.services.custom_foods import (
    CustomFoodRepository,
    CustomFoodService,
)
from wellness_tracker.services.debounce import DebouncedWriter
from wellness_tracker.services.favorites import FavoritesRepository, FavoritesService
from wellness_tracker.services.food_log import FoodLogRepository, FoodLogService
from wellness_tracker.services.nutrition import NutritionService
from wellness_tracker.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)

CHICKEN_RECORD: dict[str, object] = {
    "fdcId": 123456,
    "description": "KIRKLAND SIGNATURE CHICKEN BREAST",
    "brandOwner": "Costco",
    "brandName": "Kirkland",
    "dataType": "Branded",
    "servingSize": 112,
    "servingSizeUnit": "g",
    "foodNutrients": [
        {"nutrientId": 1008, "amount": 165},
        {"nutrientId": 1003, "amount": 31},
        {"nutrientId": 1004, "amount": 3.6},
        {"nutrientId": 1005, "amount": 0},
        {"nutrientId": 1079, "amount": 0},
        {"nutrientId": 1093, "amount": 74},
    ],
}

OATS_RECORD: dict[str, object] = {
    "fdcId": 173904,
    "description": "Oats",
    "dataType": "SR Legacy",
    "foodNutrients": [
        {"nutrient": {"id": 1008, "name": "Energy", "unitName": "kcal"}, "amount": 389},
        {"nutrient": {"id": 1003, "name": "Protein", "unitName": "g"}, "amount": 16.9},
        {
            "nutrient": {"id": 1004, "name": "Total lipid (fat)", "unitName": "g"},
            "amount": 6.9,
        },
        {
            "nutrient": {
                "id": 1005,
                "name": "Carbohydrate, by difference",
                "unitName": "g",
            },
            "amount": 66.3,
        },
        {
            "nutrient": {"id": 1079, "name": "Fiber, total dietary", "unitName": "g"},
            "amount": 10.6,
        },
    ],
}


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [CHICKEN_RECORD, OATS_RECORD],
            "totalHits": 42,
        }
    )
    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: {123456: CHICKEN_RECORD, 173904: OATS_RECORD}
    )
    search_calls: list[tuple[str, int]] = field(default_factory=list)
    food_calls: list[int] = field(default_factory=list)

    async def search_foods(
        self, query: str, *, api_key: str, page_number: int = 1, page_size: int = 10
    ) -> dict[str, object]:
        self.search_calls.append((query, page_number))
        return self.search_payload

    async def get_food(self, fdc_id: int, *, api_key: str) -> dict[str, object]:
        self.food_calls.append(fdc_id)
        if fdc_id not in self.foods:
            request = httpx.Request("GET", f"https://api.test/food/{fdc_id}")
            raise httpx.HTTPStatusError(
                "not found", request=request, response=httpx.Response(404)
            )
        return self.foods[fdc_id]


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    rows: dict[UUID, list[LogItem]] = field(default_factory=dict)
    saves: int = 0

    def list_items(self, user_id: UUID) -> list[LogItem]:
        return list(self.rows.get(user_id, []))

    def replace_items(self, user_id: UUID, items: list[LogItem]) -> None:
        self.saves += 1
        self.rows[user_id] = list(items)


@dataclass
class FlakyFoodLogRepository(InMemoryFoodLogRepository):
    """Food log repository whose first loads fail."""

    load_failures: int = 1

    def list_items(self, user_id: UUID) -> list[LogItem]:
        if self.load_failures > 0:
            self.load_failures -= 1
            raise RuntimeError("database unavailable")
        return super().list_items(user_id)


@dataclass
class InMemoryFavoritesRepository(FavoritesRepository):
    """In-memory favorites repository for tests."""

    marks: list[FavoriteMark] = field(default_factory=list)

    def list_marks(self, user_id: UUID) -> list[FavoriteMark]:
        return [mark for mark in self.marks if mark.user_id == user_id]

    def add_mark(self, mark: FavoriteMark) -> None:
        self.marks.append(mark)

    def remove_by_fdc_id(self, user_id: UUID, fdc_id: int) -> None:
        self.marks = [
            mark
            for mark in self.marks
            if not (mark.user_id == user_id and mark.fdc_id == fdc_id)
        ]

    def remove_by_custom_food_id(self, user_id: UUID, custom_food_id: UUID) -> None:
        self.marks = [
            mark
            for mark in self.marks
            if not (mark.user_id == user_id and mark.custom_food_id == custom_food_id)
        ]


@dataclass
class BrokenFavoritesRepository(InMemoryFavoritesRepository):
    """Favorites repository whose deletes fail."""

    def remove_by_custom_food_id(self, user_id: UUID, custom_food_id: UUID) -> None:
        raise RuntimeError("database unavailable")


@dataclass
class InMemoryCustomFoodRepository(CustomFoodRepository):
    """In-memory custom food repository for tests."""

    foods: list[CustomFood] = field(default_factory=list)

    def create_food(self, user_id: UUID, payload: dict[str, object]) -> CustomFood:
        food = CustomFood(
            id=uuid4(),
            user_id=user_id,
            name=str(payload["name"]),
            brand=str(payload.get("brand") or ""),
            amount_g=float(payload["amount"]),
            calories_kcal=float(payload["calories"]),
            fiber_g=float(payload["fiber"]),
            protein_g=float(payload["protein"]),
            created_at=datetime.now(tz=UTC),
        )
        self.foods.insert(0, food)
        return food

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        return [food for food in self.foods if food.user_id == user_id]

    def get_food(self, user_id: UUID, food_id: UUID) -> CustomFood | None:
        for food in self.foods:
            if food.id == food_id and food.user_id == user_id:
                return food
        return None

    def delete_food(self, user_id: UUID, food_id: UUID) -> None:
        self.foods = [food for food in self.foods if food.id != food_id]


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    settings: dict[UUID, UserSettings] = field(default_factory=dict)
    updates: list[tuple[UUID, dict[str, object]]] = field(default_factory=list)

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        return self.settings.get(user_id)

    def create_settings(self, user_id: UUID) -> UserSettings:
        created = UserSettings(user_id=user_id)
        self.settings[user_id] = created
        return created

    def update_settings(self, user_id: UUID, payload: dict[str, object]) -> None:
        self.updates.append((user_id, payload))


@dataclass
class FlakyUserSettingsRepository(InMemoryUserSettingsRepository):
    """Settings repository whose first loads fail and whose updates may fail."""

    load_failures: int = 0
    fail_updates: bool = False

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        if self.load_failures > 0:
            self.load_failures -= 1
            raise RuntimeError("database unavailable")
        return super().get_settings(user_id)

    def update_settings(self, user_id: UUID, payload: dict[str, object]) -> None:
        if self.fail_updates:
            raise RuntimeError("database unavailable")
        super().update_settings(user_id, payload)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def writer() -> DebouncedWriter:
    return DebouncedWriter(delay_seconds=0)


@pytest.fixture
def container(
    settings: Settings, fdc_client: FakeFdcClient, writer: DebouncedWriter
) -> AppContainer:
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryFoodRecordCache(),
        retry_delay_seconds=0,
    )
    custom_food_repository = InMemoryCustomFoodRepository()
    user_settings_service = UserSettingsService(
        repository=InMemoryUserSettingsRepository(),
        writer=writer,
        default_api_key=settings.fdc_api_key,
    )
    food_log_service = FoodLogService(
        repository=InMemoryFoodLogRepository(), writer=writer
    )
    favorites_service = FavoritesService(
        repository=InMemoryFavoritesRepository(),
        nutrition=nutrition_service,
        custom_foods=custom_food_repository,
    )
    custom_food_service = CustomFoodService(
        repository=custom_food_repository,
        food_log=food_log_service,
        favorites=favorites_service,
        settings=user_settings_service,
    )

    async def close_resources() -> None:
        await writer.flush()

    return AppContainer(
        settings=settings,
        writer=writer,
        nutrition_service=nutrition_service,
        food_log_service=food_log_service,
        custom_food_service=custom_food_service,
        favorites_service=favorites_service,
        user_settings_service=user_settings_service,
        close_resources=close_resources,
    )
