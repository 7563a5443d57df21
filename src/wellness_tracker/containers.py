"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from wellness_tracker.adapters.fdc_client import HttpxFdcClient
from wellness_tracker.adapters.supabase_custom_foods_repository import (
    SupabaseCustomFoodRepository,
)
from wellness_tracker.adapters.supabase_favorites_repository import (
    SupabaseFavoritesRepository,
)
from wellness_tracker.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from wellness_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from wellness_tracker.config import Settings
from wellness_tracker.services.cache import InMemoryFoodRecordCache
from wellness_tracker.services.custom_foods import CustomFoodService
from wellness_tracker.services.debounce import DebouncedWriter
from wellness_tracker.services.favorites import FavoritesService
from wellness_tracker.services.food_log import FoodLogService
from wellness_tracker.services.nutrition import NutritionService
from wellness_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    writer: DebouncedWriter
    nutrition_service: NutritionService
    food_log_service: FoodLogService
    custom_food_service: CustomFoodService
    favorites_service: FavoritesService
    user_settings_service: UserSettingsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_log_repository = SupabaseFoodLogRepository(supabase_client)
    favorites_repository = SupabaseFavoritesRepository(supabase_client)
    custom_food_repository = SupabaseCustomFoodRepository(supabase_client)
    user_settings_repository = SupabaseUserSettingsRepository(supabase_client)
    writer = DebouncedWriter(delay_seconds=resolved_settings.write_debounce_seconds)
    fdc_client = HttpxFdcClient.create(
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryFoodRecordCache(resolved_settings.food_cache_ttl_seconds),
        page_size=resolved_settings.search_page_size,
        retry_attempts=resolved_settings.fdc_retry_attempts,
        retry_delay_seconds=resolved_settings.fdc_retry_delay_seconds,
    )
    user_settings_service = UserSettingsService(
        repository=user_settings_repository,
        writer=writer,
        default_api_key=resolved_settings.fdc_api_key,
    )
    food_log_service = FoodLogService(repository=food_log_repository, writer=writer)
    favorites_service = FavoritesService(
        repository=favorites_repository,
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
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        writer=writer,
        nutrition_service=nutrition_service,
        food_log_service=food_log_service,
        custom_food_service=custom_food_service,
        favorites_service=favorites_service,
        user_settings_service=user_settings_service,
        close_resources=close_resources,
    )
