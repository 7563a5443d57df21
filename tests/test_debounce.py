"""Tests for debounced writes."""

import asyncio
import logging

import pytest

from wellness_tracker.services.debounce import DebouncedWriter


def test_writes_immediately_without_event_loop() -> None:
    writer = DebouncedWriter()
    calls: list[str] = []

    writer.schedule("key", lambda: calls.append("write"))

    assert calls == ["write"]
    assert not writer.has_pending("key")


def test_coalesces_writes_per_key() -> None:
    writer = DebouncedWriter(delay_seconds=0.01)
    calls: list[str] = []

    async def scenario() -> None:
        writer.schedule("key", lambda: calls.append("first"))
        writer.schedule("key", lambda: calls.append("second"))
        writer.schedule("other", lambda: calls.append("other"))
        assert writer.has_pending("key")
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert sorted(calls) == ["other", "second"]


def test_flush_runs_pending_writes() -> None:
    writer = DebouncedWriter(delay_seconds=10)
    calls: list[str] = []

    async def scenario() -> None:
        writer.schedule("key", lambda: calls.append("write"))
        await writer.flush()

    asyncio.run(scenario())

    assert calls == ["write"]
    assert not writer.has_pending("key")


def test_cancel_drops_pending_write() -> None:
    writer = DebouncedWriter(delay_seconds=0.01)
    calls: list[str] = []

    async def scenario() -> None:
        writer.schedule("key", lambda: calls.append("write"))
        writer.cancel("key")
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert calls == []


def test_failed_write_is_logged(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("wellness_tracker"), "propagate", True)
    writer = DebouncedWriter()

    def fail() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR):
        writer.schedule("food_log:1", fail)

    assert "Failed to persist food_log:1" in caplog.text
