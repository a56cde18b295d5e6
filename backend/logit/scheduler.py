# logit/scheduler.py
"""
Per-slot debounce timers and request generations for the workout editor.

A slot is one exercise row being edited. Each slot holds at most one pending
timer; scheduling again replaces it. Responses are matched against the
slot's generation so only the last-issued request is ever applied.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Hashable, Optional

log = logging.getLogger("uvicorn")

Callback = Callable[[], Optional[Awaitable[None]]]


class KeyedDebouncer:
    def __init__(self, delay: float):
        self.delay = delay
        self._pending: dict[Hashable, asyncio.Task] = {}
        self._running: set[asyncio.Task] = set()

    def schedule(self, slot: Hashable, callback: Callback) -> asyncio.Task:
        """(Re)start the timer for ``slot``; the previous one never fires."""
        self.cancel(slot)
        task = asyncio.get_running_loop().create_task(self._fire(slot, callback))
        self._pending[slot] = task
        return task

    async def _fire(self, slot: Hashable, callback: Callback) -> None:
        await asyncio.sleep(self.delay)
        # Past the timer: rescheduling no longer cancels this run
        current = asyncio.current_task()
        if self._pending.get(slot) is current:
            del self._pending[slot]
        self._running.add(current)
        try:
            result = callback()
            if asyncio.iscoroutine(result):
                await result
        finally:
            self._running.discard(current)

    def is_pending(self, slot: Hashable) -> bool:
        return slot in self._pending

    def cancel(self, slot: Hashable) -> bool:
        task = self._pending.pop(slot, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for slot in list(self._pending):
            self.cancel(slot)

    async def wait_idle(self) -> None:
        """Wait for pending timers and the work they started."""
        while self._pending or self._running:
            await asyncio.gather(*self._pending.values(), *self._running, return_exceptions=True)


class GenerationTracker:
    """Monotonic per-slot counters; a result is current only for the latest issue."""

    def __init__(self):
        self._current: dict[Hashable, int] = {}
        self._counter = 0

    def issue(self, slot: Hashable) -> int:
        self._counter += 1
        self._current[slot] = self._counter
        return self._counter

    def is_current(self, slot: Hashable, generation: int) -> bool:
        return self._current.get(slot) == generation

    def forget(self, slot: Hashable) -> None:
        self._current.pop(slot, None)
