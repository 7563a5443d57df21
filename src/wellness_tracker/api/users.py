"""Per-user API endpoints: settings, search, food log, custom foods, favorites."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from wellness_tracker.api.models import (
    AddRecordRequest,
    AmountChange,
    ApiKeyUpdate,
    BodyProfileRequest,
    CustomFoodForm,
    FavoriteToggle,
    SelectedEnergyUpdate,
)
from wellness_tracker.services.custom_foods import custom_food_to_log_item
from wellness_tracker.services.energy import estimate_energy
from wellness_tracker.services.export import build_export_rows, to_csv
from wellness_tracker.services.extraction import extract_nutrients, summarize_record
from wellness_tracker.services.wellness import assess_item, assess_record

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer
    from wellness_tracker.domain.custom_foods import CustomFood
    from wellness_tracker.domain.favorites import FavoriteEntry
    from wellness_tracker.domain.log import LogItem
    from wellness_tracker.domain.settings import UserSettings
    from wellness_tracker.services.rollup import AggregateTotals
    from wellness_tracker.services.wellness import WellnessReport

router = APIRouter(prefix="/users/{user_id}", tags=["users"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/settings")
async def get_settings(user_id: UUID, request: Request) -> dict[str, object]:
    """Return stored settings and saved UI state."""
    settings = _container(request).user_settings_service.load(user_id)
    return _settings_payload(settings)


@router.put("/settings/api-key")
async def update_api_key(
    user_id: UUID, body: ApiKeyUpdate, request: Request
) -> dict[str, str]:
    """Save the user's FoodData Central API key."""
    error = _container(request).user_settings_service.save_api_key(
        user_id, body.api_key
    )
    if error:
        raise HTTPException(
            status_code=422,
            detail={"api_key": error},
        )
    return {"status": "ok"}


@router.put("/settings/draft")
async def update_draft(
    user_id: UUID, body: CustomFoodForm, request: Request
) -> dict[str, str]:
    """Save the in-progress custom food form."""
    _container(request).user_settings_service.save_draft(user_id, body.to_draft())
    return {"status": "ok"}


@router.delete("/settings/draft")
async def clear_draft(user_id: UUID, request: Request) -> dict[str, str]:
    """Discard the in-progress custom food form."""
    _container(request).user_settings_service.clear_draft(user_id)
    return {"status": "ok"}


@router.put("/settings/selected-energy")
async def update_selected_energy(
    user_id: UUID, body: SelectedEnergyUpdate, request: Request
) -> dict[str, str]:
    _container(request).user_settings_service.save_selected_energy(
        user_id, body.selected_energy
    )
    return {"status": "ok"}


@router.get("/foods/search")
async def search_foods(
    user_id: UUID, request: Request, query: str, page: int = 1
) -> dict[str, object]:
    """Search FoodData Central and remember the page for the user."""
    container = _container(request)
    settings_service = container.user_settings_service
    result = await container.nutrition_service.search(
        query, page, api_key=settings_service.api_key(user_id)
    )
    settings_service.save_search_results(user_id, result.records, result.total_count)
    return {
        "foods": [_record_payload(record) for record in result.records],
        "total": result.total_count,
        "page": page,
    }


@router.get("/foods/demo")
async def demo_foods(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the built-in demo foods, which need no API key."""
    container = _container(request)
    page = container.nutrition_service.demo_page()
    container.user_settings_service.save_search_results(
        user_id, page.records, page.total_count
    )
    return {"foods": [_record_payload(record) for record in page.records], "total": 0}


@router.get("/log")
async def get_log(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the food log with totals and the overall wellness report."""
    service = _container(request).food_log_service
    items = service.get_log(user_id)
    return {
        "items": [_item_payload(item) for item in items],
        "totals": _totals_payload(service.totals(user_id)),
        "report": _report_payload(service.report(user_id)),
    }


@router.post("/log/records", status_code=status.HTTP_201_CREATED)
async def add_record(
    user_id: UUID, body: AddRecordRequest, request: Request
) -> dict[str, object]:
    """Log a lookup food, from a full record or fetched by FDC id."""
    container = _container(request)
    record = body.record
    if record is None and body.fdc_id is not None:
        record = await container.nutrition_service.fetch_by_id(
            body.fdc_id,
            api_key=container.user_settings_service.api_key(user_id),
        )
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    item = container.food_log_service.add_record(user_id, record)
    return _item_payload(item)


@router.post("/log/custom-foods/{food_id}", status_code=status.HTTP_201_CREATED)
async def add_custom_food(
    user_id: UUID, food_id: UUID, request: Request
) -> dict[str, object]:
    """Log a custom food at its own amount."""
    container = _container(request)
    food = container.custom_food_service.get(user_id, food_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    item = container.food_log_service.add_item(user_id, custom_food_to_log_item(food))
    return _item_payload(item)


@router.patch("/log/items/{item_id}")
async def update_amount(
    user_id: UUID, item_id: str, body: AmountChange, request: Request
) -> dict[str, object]:
    """Change a log item's serving; the error, if any, is returned alongside."""
    update = _container(request).food_log_service.update_amount(
        user_id, item_id, body.grams, apply_invalid=body.apply_invalid
    )
    if update is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"item": _item_payload(update.item), "error": update.error}


@router.delete("/log/items/{item_id}")
async def remove_item(user_id: UUID, item_id: str, request: Request) -> dict[str, str]:
    if not _container(request).food_log_service.remove_item(user_id, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "ok"}


@router.delete("/log")
async def clear_log(user_id: UUID, request: Request) -> dict[str, str]:
    _container(request).food_log_service.clear(user_id)
    return {"status": "ok"}


@router.post("/log/items/{item_id}/favorite")
async def toggle_item_favorite(
    user_id: UUID, item_id: str, request: Request
) -> dict[str, object]:
    """Toggle the favorite mark of the food behind a log item."""
    container = _container(request)
    item = container.food_log_service.get_item(user_id, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"favorite": container.favorites_service.toggle_item(user_id, item)}


@router.get("/custom-foods")
async def list_custom_foods(user_id: UUID, request: Request) -> dict[str, object]:
    foods = _container(request).custom_food_service.list_foods(user_id)
    return {"foods": [_custom_food_payload(food) for food in foods]}


@router.post("/custom-foods", status_code=status.HTTP_201_CREATED)
async def create_custom_food(
    user_id: UUID, body: CustomFoodForm, request: Request
) -> dict[str, object]:
    """Create a custom food; invalid fields are reported with a 422."""
    food = _container(request).custom_food_service.create(user_id, body.to_draft())
    return _custom_food_payload(food)


@router.delete("/custom-foods/{food_id}")
async def delete_custom_food(
    user_id: UUID, food_id: UUID, request: Request
) -> dict[str, str]:
    """Delete a custom food, its favorite mark and its log items."""
    if not _container(request).custom_food_service.delete(user_id, food_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "ok"}


@router.get("/favorites")
async def list_favorites(user_id: UUID, request: Request) -> dict[str, object]:
    """Return favorites resolved to their foods."""
    container = _container(request)
    entries = await container.favorites_service.resolve(
        user_id, api_key=container.user_settings_service.api_key(user_id)
    )
    return {"favorites": [_favorite_payload(entry) for entry in entries]}


@router.post("/favorites/external")
async def toggle_external_favorite(
    user_id: UUID, body: FavoriteToggle, request: Request
) -> dict[str, bool]:
    favorite = _container(request).favorites_service.toggle_external(
        user_id, body.fdc_id, body.food_name, body.record
    )
    return {"favorite": favorite}


@router.post("/favorites/custom/{food_id}")
async def toggle_custom_favorite(
    user_id: UUID, food_id: UUID, request: Request
) -> dict[str, bool]:
    container = _container(request)
    food = container.custom_food_service.get(user_id, food_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"favorite": container.favorites_service.toggle_custom(user_id, food)}


@router.get("/export.csv")
async def export_csv(
    user_id: UUID, request: Request, profile: BodyProfileRequest = Depends()
) -> Response:
    """Download the energy estimate and food log as a spreadsheet."""
    items = _container(request).food_log_service.get_log(user_id)
    rows = build_export_rows(items, estimate_energy(profile.to_profile()))
    return Response(
        content=to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="wellness_results.csv"'},
    )


def _settings_payload(settings: UserSettings) -> dict[str, object]:
    return {
        "has_api_key": bool(settings.fdc_api_key),
        "search_results": settings.search_results,
        "total_results": settings.total_results,
        "custom_food_draft": settings.custom_food_draft.to_dict(),
        "selected_energy": settings.selected_energy,
    }


def _record_payload(record: dict[str, object]) -> dict[str, object]:
    """Summarize a lookup record with its 100 g nutrients and factors."""
    summary = summarize_record(record)
    report = assess_record(record)
    return {
        "fdc_id": summary.fdc_id,
        "description": summary.description,
        "brand": summary.brand,
        "data_type": summary.data_type,
        "per_100g": extract_nutrients(record).to_dict(),
        "factors": report.formatted(),
        "favorable": report.favorable,
        "record": record,
    }


def _item_payload(item: LogItem) -> dict[str, object]:
    report = assess_item(item)
    return {
        "id": item.id,
        "name": item.name,
        "brand": item.brand,
        "serving_g": item.serving_g,
        "nutrients": item.nutrients.to_dict(),
        "base_per_g": item.basis.to_dict(),
        "fdc_id": item.fdc_id,
        "custom_food_id": str(item.custom_food_id) if item.custom_food_id else None,
        "factors": report.formatted(),
        "favorable": report.favorable,
    }


def _totals_payload(totals: AggregateTotals) -> dict[str, float]:
    return {
        "mass_g": totals.mass_g,
        "calories_kcal": totals.calories_kcal,
        "protein_g": totals.protein_g,
        "fiber_g": totals.fiber_g,
    }


def _report_payload(report: WellnessReport) -> dict[str, object]:
    return {"factors": report.formatted(), "favorable": report.favorable}


def _custom_food_payload(food: CustomFood) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "brand": food.brand,
        "amount_g": food.amount_g,
        "calories_kcal": food.calories_kcal,
        "fiber_g": food.fiber_g,
        "protein_g": food.protein_g,
        "carbs_g": food.derived_carbs_g,
        "created_at": food.created_at.isoformat() if food.created_at else None,
    }


def _favorite_payload(entry: FavoriteEntry) -> dict[str, object]:
    mark = entry.mark
    payload: dict[str, object] = {
        "food_name": mark.food_name,
        "fdc_id": mark.fdc_id,
        "custom_food_id": str(mark.custom_food_id) if mark.custom_food_id else None,
        "renderable": entry.renderable,
    }
    if entry.record is not None:
        payload["food"] = _record_payload(entry.record)
    elif entry.custom_food is not None:
        payload["food"] = _custom_food_payload(entry.custom_food)
    return payload
