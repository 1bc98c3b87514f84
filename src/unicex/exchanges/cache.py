"""Time-windowed cache serialized by an asyncio lock."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class TimedCache(Generic[T]):
    """Holds one value that is reloaded lazily once it is older than ``duration``.

    Every access runs under the cache's lock, so concurrent callers queue
    behind a refresh instead of issuing their own fetch. The lookup passed to
    :meth:`get` also runs under the lock, which makes fetch-and-read one
    atomic unit. A failed load leaves the previous value and timestamp
    untouched, so the next call tries again.
    """

    def __init__(
        self,
        duration: float,
        *,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.duration = duration
        self.name = name
        self._clock = clock
        self._lock = asyncio.Lock()
        self._value: T | None = None
        self._last_updated: float | None = None

    @property
    def last_updated(self) -> float | None:
        return self._last_updated

    def is_stale(self, now: float | None = None) -> bool:
        if self._last_updated is None:
            return True
        if now is None:
            now = self._clock()
        return now - self._last_updated >= self.duration

    def invalidate(self) -> None:
        """Force the next access to reload."""
        self._last_updated = None

    async def get(
        self,
        loader: Callable[[], Awaitable[T]],
        select: Callable[[T], R] | None = None,
    ) -> T | R:
        """Return the cached value (or ``select(value)``), reloading if stale."""
        async with self._lock:
            now = self._clock()
            if self.is_stale(now):
                logger.debug("Refreshing %s", self.name)
                try:
                    value = await loader()
                except Exception as e:
                    logger.warning("Failed to refresh %s: %s", self.name, e)
                    raise
                self._value = value
                self._last_updated = now
            if select is None:
                return self._value  # type: ignore[return-value]
            return select(self._value)  # type: ignore[arg-type]
