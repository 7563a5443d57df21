"""Food log service: item creation, amount changes and the per-user log."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID, uuid4

from wellness_tracker.domain.log import AmountUpdate, LogItem
from wellness_tracker.numeric import safe_number
from wellness_tracker.services.basis import (
    basis_from_record,
    ensure_basis,
    stored_basis,
)
from wellness_tracker.services.debounce import DebouncedWriter
from wellness_tracker.services.extraction import (
    DEFAULT_BASIS_GRAMS,
    parse_int_id,
    summarize_record,
)
from wellness_tracker.services.rollup import AggregateTotals, assess_totals, rollup
from wellness_tracker.services.wellness import WellnessReport

MAX_AMOUNT_G = 10000.0

_logger = logging.getLogger(__name__)


class FoodLogUnavailable(RuntimeError):
    """Raised when a user's stored log cannot be loaded before a change."""


class FoodLogRepository(Protocol):
    """Persistence interface for a user's food log."""

    def list_items(self, user_id: UUID) -> list[LogItem]:
        """Return the stored log in display order, newest first."""

    def replace_items(self, user_id: UUID, items: list[LogItem]) -> None:
        """Replace the stored log with ``items``."""


def validate_amount(grams: object) -> str:
    """Return a field error for a user-entered amount, or an empty string."""
    value = max(0.0, safe_number(grams))
    if value <= 0:
        return "Amount must be greater than 0"
    if value > MAX_AMOUNT_G:
        return "Amount must be 10000g or less"
    return ""


def set_amount(item: LogItem, grams: object) -> LogItem:
    """Return the item at a new serving, recomputed from its basis.

    Negative or non-numeric amounts clamp to zero.
    """
    serving = max(0.0, safe_number(grams))
    return replace(item, serving_g=serving, nutrients=item.basis.scaled(serving))


def create_log_item(source: Mapping[str, object] | LogItem) -> LogItem:
    """Create a log item with a fresh identity.

    ``source`` is an existing item, a row that already carries a per-gram
    basis (favorites, custom foods, stored rows), or a raw FDC record.
    """
    if isinstance(source, LogItem):
        return replace(source, id=_new_item_id())
    if not isinstance(source, Mapping):
        source = {}
    if stored_basis(source) is not None:
        return restore_log_item({**source, "id": _new_item_id()})
    basis, serving = basis_from_record(source)
    summary = summarize_record(source)
    return LogItem(
        id=_new_item_id(),
        name=summary.description,
        brand=summary.brand,
        serving_g=serving,
        nutrients=basis.scaled(serving),
        basis=basis,
        fdc_id=summary.fdc_id,
    )


def restore_log_item(row: Mapping[str, object]) -> LogItem:
    """Rebuild an item from a row carrying a basis, keeping its identity.

    A usable stored basis is reused unchanged; otherwise one is synthesized
    from the row's absolute fields.
    """
    basis = ensure_basis(row)
    serving = max(0.0, safe_number(row.get("serving"), DEFAULT_BASIS_GRAMS))
    fdc_id = parse_int_id(row.get("fdcId", row.get("fdc_id")))
    custom_food_id = (
        None
        if fdc_id is not None
        else _parse_uuid(row.get("customFoodId", row.get("custom_food_id")))
    )
    brand = row.get("brand")
    return LogItem(
        id=str(row.get("id") or _new_item_id()),
        name=str(row.get("name") or "Food"),
        brand=str(brand) if brand else None,
        serving_g=serving,
        nutrients=basis.scaled(serving),
        basis=basis,
        fdc_id=fdc_id,
        custom_food_id=custom_food_id,
    )


@dataclass
class FoodLogService:
    """Holds each user's current log and persists it on change."""

    repository: FoodLogRepository
    writer: DebouncedWriter
    _logs: dict[UUID, list[LogItem]] = field(default_factory=dict)

    def get_log(self, user_id: UUID) -> list[LogItem]:
        """Return the current log, newest first, loading it on first use.

        A failed load reads as an empty log and is retried on the next call.
        """
        try:
            return list(self._load(user_id))
        except FoodLogUnavailable:
            return []

    def add_record(self, user_id: UUID, record: Mapping[str, object]) -> LogItem:
        """Log a raw lookup record at its declared serving."""
        return self._prepend(user_id, create_log_item(record))

    def add_item(
        self, user_id: UUID, source: Mapping[str, object] | LogItem
    ) -> LogItem:
        """Log a copy of an existing item or of a row carrying a basis."""
        return self._prepend(user_id, create_log_item(source))

    def get_item(self, user_id: UUID, item_id: str) -> LogItem | None:
        for item in self.get_log(user_id):
            if item.id == item_id:
                return item
        return None

    def update_amount(
        self,
        user_id: UUID,
        item_id: str,
        grams: object,
        *,
        apply_invalid: bool = False,
    ) -> AmountUpdate | None:
        """Change an item's serving.

        An amount outside (0, 10000] is reported in the result and, unless
        ``apply_invalid`` is set, leaves the last valid amount in effect.
        """
        items = self._load(user_id)
        item = next((entry for entry in items if entry.id == item_id), None)
        if item is None:
            return None
        error = validate_amount(grams)
        if error and not apply_invalid:
            return AmountUpdate(item=item, error=error)
        updated = set_amount(item, grams)
        self._store(
            user_id, [updated if entry.id == item_id else entry for entry in items]
        )
        return AmountUpdate(item=updated, error=error)

    def remove_item(self, user_id: UUID, item_id: str) -> bool:
        items = self._load(user_id)
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._store(user_id, remaining)
        return True

    def clear(self, user_id: UUID) -> None:
        self._load(user_id)
        self._store(user_id, [])

    def remove_custom_food_items(self, user_id: UUID, custom_food_id: UUID) -> int:
        """Drop every item made from a custom food; return how many were removed."""
        items = self._load(user_id)
        remaining = [item for item in items if item.custom_food_id != custom_food_id]
        removed = len(items) - len(remaining)
        if removed:
            self._store(user_id, remaining)
        return removed

    def totals(self, user_id: UUID) -> AggregateTotals:
        return rollup(self.get_log(user_id))

    def report(self, user_id: UUID) -> WellnessReport:
        return assess_totals(self.totals(user_id))

    def _prepend(self, user_id: UUID, item: LogItem) -> LogItem:
        self._store(user_id, [item, *self._load(user_id)])
        return item

    def _load(self, user_id: UUID) -> list[LogItem]:
        """Return the cached log, loading it first.

        Changes go through here so a log that failed to load is never saved
        over the stored rows.
        """
        if user_id not in self._logs:
            try:
                stored = self.repository.list_items(user_id)
            except Exception as exc:
                _logger.exception("Failed to load food log for %s", user_id)
                raise FoodLogUnavailable(
                    f"Food log for {user_id} could not be loaded"
                ) from exc
            self._logs[user_id] = list(stored)
        return self._logs[user_id]

    def _store(self, user_id: UUID, items: list[LogItem]) -> None:
        self._logs[user_id] = items
        snapshot = list(items)
        self.writer.schedule(
            f"food_log:{user_id}",
            lambda: self.repository.replace_items(user_id, snapshot),
        )


def _new_item_id() -> str:
    return str(uuid4())


def _parse_uuid(value: object) -> UUID | None:
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value)
        except ValueError:
            return None
    return None
