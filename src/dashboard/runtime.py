"""Background event loop for driving async controllers from Streamlit.

Streamlit executes the page script in its own worker threads and reruns it
on every interaction, so the controllers' tasks live on one long-running
loop in a daemon thread. The page submits work with `call` / `run`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable

log = logging.getLogger(__name__)


class LoopRunner:
    def __init__(self, name: str = "dashboard-loop"):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()
        log.info("Started event loop thread %s", name)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def call(self, fn: Callable[..., Any], *args, timeout: float = 5.0) -> Any:
        """Run a plain function on the loop thread and return its result."""

        async def _invoke():
            return fn(*args)

        return self.run(_invoke(), timeout=timeout)

    def run(self, coro: Awaitable[Any], timeout: float = 30.0) -> Any:
        """Run a coroutine on the loop thread and wait for its result."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)
