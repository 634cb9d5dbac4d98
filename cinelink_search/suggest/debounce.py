"""Cancellable debounce timer for asyncio callers."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs ``callback`` once input has been quiet for ``delay`` seconds.

    ``start()`` schedules a call with the given arguments, replacing any
    pending one; ``cancel()`` drops the pending call. Only the arguments of
    the last ``start()`` before the quiet period are ever delivered.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]) -> None:
        self.delay = delay
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._fire(args, kwargs))

    reset = start

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        task = self._task
        if task is None or task.done():
            return False
        task.cancel()
        self._task = None
        return True

    async def wait(self) -> None:
        """Wait for the pending call (if any) to fire or be cancelled."""
        task = self._task
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _fire(self, args: tuple, kwargs: dict) -> None:
        await asyncio.sleep(self.delay)
        try:
            result = self._callback(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Debounced callback failed")
