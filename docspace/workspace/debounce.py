"""asyncio debounce timer shared by autosave and search."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run ``callback`` once input has been quiet for ``delay`` seconds.

    ``trigger()`` restarts the countdown. Only the waiting phase is
    cancellable: once the callback has started it runs to completion, since
    in-flight network calls are not cancelled.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]], *, name: str = "debounce"):
        self.delay = delay
        self._callback = callback
        self._name = name
        self._waiting: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        """True while a countdown is armed."""
        return self._waiting is not None and not self._waiting.done()

    def trigger(self) -> None:
        self.cancel()
        self._waiting = asyncio.get_running_loop().create_task(
            self._wait_then_fire(), name=f"{self._name}-timer"
        )

    def cancel(self) -> None:
        if self._waiting is not None and not self._waiting.done():
            self._waiting.cancel()
        self._waiting = None

    async def _wait_then_fire(self) -> None:
        await asyncio.sleep(self.delay)
        # Detach from the waiting slot so a new trigger() cannot cancel the callback.
        self._waiting = None
        self._running = asyncio.current_task()
        try:
            await self._callback()
        except Exception:
            logger.exception("%s callback failed", self._name)

    async def flush(self) -> None:
        """Fire now if a countdown is armed."""
        if self.pending:
            self.cancel()
            await self._callback()

    async def wait_idle(self) -> None:
        """Wait until no countdown is armed and no callback is running."""
        while True:
            task = self._waiting if self.pending else self._running
            if task is None or task.done():
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if task.cancelled() and not asyncio.current_task().cancelling():
                    continue
                raise


__all__ = ["Debouncer"]
