"""
Session cache — one lazily fetched value owned by a terminal session.

    catalog = SessionCache("catalog", lambda: load_catalog(store))

    result = await catalog.get()       # fetch on first use, then hit
    result = await catalog.refresh()   # always fetch
    catalog.invalidate()

Created at session start and dropped with the session; nothing is shared
between sessions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from kungfu import LazyCoroResult, Result, Ok, Error

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Cached[T]:
    """Cached value with metadata."""

    value: T
    hit: bool
    loaded_at: datetime


class SessionCache[T, E]:
    def __init__(
        self,
        name: str,
        fetch: Callable[[], LazyCoroResult[T, E]],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._name = name
        self._fetch = fetch
        self._clock = clock or (lambda: datetime.now(UTC))
        self._slot: Cached[T] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> T | None:
        return self._slot.value if self._slot is not None else None

    @property
    def loaded_at(self) -> datetime | None:
        return self._slot.loaded_at if self._slot is not None else None

    def get(self) -> LazyCoroResult[Cached[T], E]:
        """Cached value if present, otherwise fetch."""

        async def execute() -> Result[Cached[T], E]:
            if self._slot is not None:
                logger.debug("%s cache hit", self._name)
                return Ok(Cached(self._slot.value, hit=True, loaded_at=self._slot.loaded_at))
            return await self._load()

        return LazyCoroResult(execute)

    def refresh(self) -> LazyCoroResult[Cached[T], E]:
        """
        Fetch again. On failure the old value is dropped, so callers show an
        error state rather than a stale snapshot.
        """
        return LazyCoroResult(self._load)

    def invalidate(self) -> bool:
        had = self._slot is not None
        self._slot = None
        return had

    async def _load(self) -> Result[Cached[T], E]:
        result = await self._fetch()
        match result:
            case Ok(value):
                self._slot = Cached(value, hit=False, loaded_at=self._clock())
                logger.debug("%s cache refreshed", self._name)
                return Ok(self._slot)
            case Error(e):
                self._slot = None
                return Error(e)


__all__ = ("Cached", "SessionCache")
