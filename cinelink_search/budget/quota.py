"""Rolling 24-hour remote API call quota."""

from __future__ import annotations

import logging
import time
from typing import Callable

from cinelink_search.config import API_LIMIT_KEY, QUOTA_WINDOW_SECONDS
from cinelink_search.contracts import KeyValueStorage, QuotaState
from cinelink_search.errors import StorageError
from cinelink_search.storage import load_json, save_json

logger = logging.getLogger(__name__)

DEFAULT_CEILING = 900


class QuotaTracker:
    """Counts remote calls per window and enforces the daily ceiling.

    Only remote calls are gated; local lookups never consult the tracker.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        ceiling: int = DEFAULT_CEILING,
        window: float = QUOTA_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
        key: str = API_LIMIT_KEY,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self.ceiling = ceiling
        self.window = window
        self._state = QuotaState(calls=0, reset_at=clock() + window)

    @property
    def calls(self) -> int:
        return self._state["calls"]

    @property
    def reset_at(self) -> float:
        return self._state["reset_at"]

    @property
    def remaining(self) -> int:
        return max(0, self.ceiling - self.calls)

    def state(self) -> QuotaState:
        return QuotaState(calls=self.calls, reset_at=self.reset_at)

    async def load(self) -> None:
        """Restore persisted state, resetting it if the window already elapsed."""
        data = await load_json(self._storage, self._key)
        if isinstance(data, dict):
            try:
                self._state = QuotaState(
                    calls=int(data["calls"]), reset_at=float(data["reset_at"])
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Quota blob is malformed; starting a fresh window")
        await self._roll_window()

    async def can_call(self) -> bool:
        """True if another remote call fits in the current window."""
        await self._roll_window()
        allowed = self.calls < self.ceiling
        if not allowed:
            logger.debug("Quota exhausted: %d/%d calls", self.calls, self.ceiling)
        return allowed

    async def record_call(self) -> None:
        """Count one remote attempt, whatever its outcome."""
        self._state["calls"] += 1
        await self._persist()

    async def _roll_window(self) -> None:
        now = self._clock()
        if now >= self._state["reset_at"]:
            self._state = QuotaState(calls=0, reset_at=now + self.window)
            await self._persist()
            logger.debug("Quota window reset")

    async def _persist(self) -> None:
        try:
            await save_json(self._storage, self._key, self._state)
        except StorageError as exc:
            logger.warning("Could not persist quota state: %s", exc)

    def summary(self) -> str:
        """Human-readable quota summary."""
        pct = (self.calls / self.ceiling * 100) if self.ceiling > 0 else 0
        resets_in = max(0.0, self.reset_at - self._clock())
        hours, rem = divmod(int(resets_in), 3600)
        return (
            f"API calls: {self.calls:,}/{self.ceiling:,} ({pct:.1f}%) | "
            f"Remaining: {self.remaining:,} | "
            f"Resets in {hours}h{rem // 60:02d}m"
        )
