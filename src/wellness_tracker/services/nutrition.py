"""Food lookup service integrating USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from wellness_tracker.adapters.fdc_client import FdcClient
from wellness_tracker.domain.nutrition import SearchPage
from wellness_tracker.numeric import safe_number
from wellness_tracker.services.cache import FoodRecordCache

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

HTTP_FORBIDDEN = 403

DEMO_FOODS: tuple[dict[str, object], ...] = (
    {
        "fdcId": 1,
        "description": "Apple, raw, with skin",
        "dataType": "SR Legacy",
        "labelNutrients": {
            "calories": {"value": 52},
            "protein": {"value": 0.3},
            "fat": {"value": 0.2},
            "carbohydrates": {"value": 14},
            "fiber": {"value": 2.4},
            "sugars": {"value": 10.4},
        },
    },
    {
        "fdcId": 2,
        "description": "Chicken breast, roasted",
        "dataType": "SR Legacy",
        "labelNutrients": {
            "calories": {"value": 165},
            "protein": {"value": 31},
            "fat": {"value": 3.6},
            "carbohydrates": {"value": 0},
            "fiber": {"value": 0},
            "saturatedFat": {"value": 1.0},
            "cholesterol": {"value": 85},
        },
    },
    {
        "fdcId": 3,
        "description": "Brown rice, cooked",
        "dataType": "SR Legacy",
        "labelNutrients": {
            "calories": {"value": 111},
            "protein": {"value": 2.6},
            "fat": {"value": 0.9},
            "carbohydrates": {"value": 23},
            "fiber": {"value": 1.8},
            "sugars": {"value": 0.4},
            "sodium": {"value": 5},
        },
    },
    {
        "fdcId": 4,
        "description": "Kale, raw",
        "dataType": "SR Legacy",
        "labelNutrients": {
            "calories": {"value": 49},
            "protein": {"value": 4.3},
            "fat": {"value": 0.9},
            "carbohydrates": {"value": 9},
            "fiber": {"value": 3.6},
            "sugars": {"value": 2.3},
            "sodium": {"value": 38},
        },
    },
    {
        "fdcId": 5,
        "description": "Beef, ground, 90% lean, cooked",
        "dataType": "SR Legacy",
        "labelNutrients": {
            "calories": {"value": 242},
            "protein": {"value": 26.1},
            "fat": {"value": 14},
            "carbohydrates": {"value": 0},
            "fiber": {"value": 0},
            "saturatedFat": {"value": 5.7},
            "cholesterol": {"value": 88},
        },
    },
)


class LookupFailure(RuntimeError):
    """Raised when a food search cannot be completed."""


@dataclass
class NutritionService:
    """Service for food searches and cached lookups by FDC id."""

    fdc_client: FdcClient
    cache: FoodRecordCache
    page_size: int = 10
    retry_attempts: int = 2
    retry_delay_seconds: float = 1.0

    async def search(self, query: str, page: int = 1, *, api_key: str) -> SearchPage:
        """Search FDC foods; failures are raised as ``LookupFailure``."""
        if not api_key:
            raise LookupFailure("Enter your (free) USDA API key or use demo foods.")
        try:
            payload = await self.fdc_client.search_foods(
                query, api_key=api_key, page_number=page, page_size=self.page_size
            )
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == HTTP_FORBIDDEN:
                raise LookupFailure(
                    "403 from USDA. Check your key, or use demo foods."
                ) from exc
            raise LookupFailure(f"Search failed ({status_code}).") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise LookupFailure(f"Search failed ({type(exc).__name__}).") from exc

        foods = payload.get("foods") if isinstance(payload, dict) else None
        records = [food for food in foods or [] if isinstance(food, dict)]
        total = int(safe_number(payload.get("totalHits"))) if records else 0
        if not total and len(records) > self.page_size:
            total = len(records)
        _logger.info(
            "Food search: query=%s page=%s results=%s total=%s",
            query,
            page,
            len(records),
            total,
        )
        return SearchPage(records=records, total_count=total)

    async def fetch_by_id(
        self, fdc_id: int, *, api_key: str
    ) -> dict[str, object] | None:
        """Return a food record by FDC id, or None when it cannot be fetched."""
        cached = self.cache.get(fdc_id)
        if cached is not None:
            return cached
        if not api_key:
            _logger.info("No API key for fetching food %s", fdc_id)
            return None
        record = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id, api_key=api_key),
            action=f"get_food:{fdc_id}",
        )
        if record is not None:
            self.cache.put(fdc_id, record)
        return record

    def demo_page(self) -> SearchPage:
        """Return the built-in demo foods as a search page."""
        return SearchPage(records=[dict(food) for food in DEMO_FOODS], total_count=0)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object] | None:
        """Call with a fixed-delay retry; a timeout ends the attempt cycle."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.TimeoutException as exc:
                _logger.warning("Lookup %s timed out, not retrying: %s", action, exc)
                return None
            except (httpx.HTTPError, ValueError) as exc:
                attempt += 1
                _logger.warning(
                    "Lookup %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    return None
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
