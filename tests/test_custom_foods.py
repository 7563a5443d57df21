"""Tests for custom foods."""

from uuid import uuid4

import pytest

from tests.conftest import (
    OATS_RECORD,
    BrokenFavoritesRepository,
    FlakyFoodLogRepository,
)
from wellness_tracker.domain.custom_foods import CustomFood, CustomFoodDraft
from wellness_tracker.services.custom_foods import (
    CustomFoodValidationError,
    custom_food_to_log_item,
    validate_custom_food_draft,
)


def _draft(**overrides: str) -> CustomFoodDraft:
    values = {
        "name": "Protein pancake",
        "amount": "100",
        "calories": "120",
        "fiber": "3",
        "protein": "10",
    }
    values.update(overrides)
    return CustomFoodDraft(**values)


def test_valid_draft_has_no_errors() -> None:
    assert validate_custom_food_draft(_draft()) == {}


@pytest.mark.parametrize(
    "overrides,key,message",
    [
        ({"name": "  "}, "name", "Food name is required"),
        ({"name": "A"}, "name", "Name must be at least 2 characters"),
        ({"amount": "0"}, "amount", "Amount must be greater than 0"),
        ({"amount": "10001"}, "amount", "Amount must be 10000g or less"),
        ({"calories": "-1"}, "calories", "Calories cannot be negative"),
        ({"calories": ""}, "calories", "Calories cannot be negative"),
        ({"calories": "10001"}, "calories", "Calories must be 10000 or less"),
        ({"fiber": "-2"}, "fiber", "Fiber cannot be negative"),
        ({"protein": "1001"}, "protein", "Protein must be 1000g or less"),
    ],
)
def test_draft_field_errors(overrides: dict[str, str], key: str, message: str) -> None:
    assert validate_custom_food_draft(_draft(**overrides))[key] == message


def test_log_item_derives_carbs_and_zero_fat() -> None:
    food = CustomFood(
        id=uuid4(),
        user_id=uuid4(),
        name="Protein pancake",
        brand="",
        amount_g=100,
        calories_kcal=120,
        fiber_g=3,
        protein_g=10,
    )

    item = custom_food_to_log_item(food)

    assert item.custom_food_id == food.id
    assert item.fdc_id is None
    assert item.brand == "Custom"
    assert item.serving_g == 100
    assert item.nutrients.carbs_g == pytest.approx(20)
    assert item.nutrients.fat_g == 0
    assert item.nutrients.protein_g == pytest.approx(10)
    assert item.fiber_g == pytest.approx(3)


def test_log_item_carbs_never_negative() -> None:
    food = CustomFood(
        id=uuid4(),
        user_id=uuid4(),
        name="Whey",
        brand="Acme",
        amount_g=30,
        calories_kcal=100,
        fiber_g=0,
        protein_g=30,
    )

    item = custom_food_to_log_item(food)

    assert item.nutrients.carbs_g == 0
    assert item.brand == "Acme"


def test_create_stores_food_and_clears_draft(container, user_id) -> None:
    settings_service = container.user_settings_service
    settings_service.save_draft(user_id, _draft(name="Half typed"))

    food = container.custom_food_service.create(user_id, _draft(name=" Pancake "))

    assert food.name == "Pancake"
    assert container.custom_food_service.list_foods(user_id) == [food]
    assert settings_service.load(user_id).custom_food_draft == CustomFoodDraft()
    updates = settings_service.repository.updates
    assert updates[-1] == (user_id, {"custom_food_draft": {}})


def test_create_rejects_invalid_form(container, user_id) -> None:
    with pytest.raises(CustomFoodValidationError) as excinfo:
        container.custom_food_service.create(user_id, _draft(name="", amount="x"))

    assert set(excinfo.value.errors) == {"name", "amount"}
    assert container.custom_food_service.list_foods(user_id) == []


def test_delete_cascades_to_favorites_and_log(container, user_id) -> None:
    service = container.custom_food_service
    food_log = container.food_log_service
    food = service.create(user_id, _draft())
    other = service.create(user_id, _draft(name="Other pancake"))
    food_log.add_item(user_id, custom_food_to_log_item(food))
    food_log.add_item(user_id, custom_food_to_log_item(other))
    food_log.add_record(user_id, OATS_RECORD)
    container.favorites_service.toggle_custom(user_id, food)

    assert service.delete(user_id, food.id) is True

    assert [f.id for f in service.list_foods(user_id)] == [other.id]
    remaining = food_log.get_log(user_id)
    assert [item.custom_food_id for item in remaining] == [None, other.id]
    assert not container.favorites_service.is_favorite(
        user_id, custom_food_id=food.id
    )


def test_delete_missing_food(container, user_id) -> None:
    assert container.custom_food_service.delete(user_id, uuid4()) is False


def test_delete_removes_log_items_when_favorite_removal_fails(
    container, user_id
) -> None:
    service = container.custom_food_service
    food_log = container.food_log_service
    food = service.create(user_id, _draft())
    food_log.add_item(user_id, custom_food_to_log_item(food))
    container.favorites_service.repository = BrokenFavoritesRepository()

    assert service.delete(user_id, food.id) is True

    assert service.list_foods(user_id) == []
    assert food_log.get_log(user_id) == []


def test_delete_removes_favorite_when_log_cannot_load(container, user_id) -> None:
    service = container.custom_food_service
    food = service.create(user_id, _draft())
    container.favorites_service.toggle_custom(user_id, food)
    stored = custom_food_to_log_item(food)
    repository = FlakyFoodLogRepository(rows={user_id: [stored]})
    container.food_log_service.repository = repository

    assert service.delete(user_id, food.id) is True

    assert not container.favorites_service.is_favorite(
        user_id, custom_food_id=food.id
    )
    assert repository.rows[user_id] == [stored]
    assert repository.saves == 0
