"""Trailing-edge debounce on top of asyncio."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional


class Debouncer:
    """Call `callback(value)` once input has been quiet for `delay` seconds.

    Each `push` cancels the pending call and starts a new delay. Must be used
    from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[[Any], None]):
        self.delay = delay
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: Any) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire(value))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _fire(self, value: Any) -> None:
        await asyncio.sleep(self.delay)
        self._task = None
        self.callback(value)
