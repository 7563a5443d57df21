"""Cache for food records fetched from the lookup service."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class FoodRecordCache(Protocol):
    """Cache interface for raw food records keyed by FDC id."""

    def get(self, fdc_id: int) -> dict[str, object] | None:
        """Return a cached record if present and not expired."""

    def put(self, fdc_id: int, record: dict[str, object]) -> None:
        """Store a record."""

    def has(self, fdc_id: int) -> bool:
        """Return True when a live record is cached."""


@dataclass
class _CacheEntry:
    record: dict[str, object]
    expires_at: datetime | None


@dataclass
class InMemoryFoodRecordCache(FoodRecordCache):
    """In-memory record cache with an optional TTL."""

    ttl_seconds: int | None
    _entries: dict[int, _CacheEntry]

    def __init__(self, ttl_seconds: int | None = None) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries = {}

    def get(self, fdc_id: int) -> dict[str, object] | None:
        """Return a cached record if it hasn't expired."""
        entry = self._entries.get(fdc_id)
        if entry is None:
            return None
        if entry.expires_at is not None and datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(fdc_id, None)
            return None
        return entry.record

    def put(self, fdc_id: int, record: dict[str, object]) -> None:
        """Store a record, expiring after the TTL when one is set."""
        expires_at = (
            datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
            if self.ttl_seconds is not None
            else None
        )
        self._entries[fdc_id] = _CacheEntry(record=record, expires_at=expires_at)

    def has(self, fdc_id: int) -> bool:
        return self.get(fdc_id) is not None
