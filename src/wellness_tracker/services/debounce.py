"""Debounced persistence writes."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)

Write = Callable[[], None]


@dataclass
class _PendingWrite:
    write: Write
    task: asyncio.Task[None]


@dataclass
class DebouncedWriter:
    """Coalesces writes per key until the key has been quiet for ``delay_seconds``.

    Scheduling a key again cancels its pending write. Outside a running
    event loop a write is performed immediately. A failed write is logged and
    dropped.
    """

    delay_seconds: float = 0.5
    _pending: dict[str, _PendingWrite] = field(default_factory=dict)

    def schedule(self, key: str, write: Write) -> None:
        """Replace any pending write for ``key`` and restart its timer."""
        self.cancel(key)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _run_write(key, write)
            return
        task = loop.create_task(self._run_later(key, write))
        self._pending[key] = _PendingWrite(write=write, task=task)

    def cancel(self, key: str) -> None:
        pending = self._pending.pop(key, None)
        if pending is not None:
            pending.task.cancel()

    def has_pending(self, key: str) -> bool:
        return key in self._pending

    async def flush(self) -> None:
        """Run every pending write now."""
        pending = list(self._pending.items())
        self._pending.clear()
        for key, entry in pending:
            entry.task.cancel()
            _run_write(key, entry.write)

    async def _run_later(self, key: str, write: Write) -> None:
        await asyncio.sleep(self.delay_seconds)
        current = self._pending.get(key)
        if current is None or current.write is not write:
            return
        del self._pending[key]
        _run_write(key, write)


def _run_write(key: str, write: Write) -> None:
    try:
        write()
    except Exception:
        _logger.exception("Failed to persist %s", key)
