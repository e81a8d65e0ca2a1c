from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic
from typing import Any

import structlog

logger = structlog.get_logger()

InvalidationListener = Callable[[str], None]


@dataclass(slots=True)
class CacheEntry:
    data: Any = None
    stale: bool = True
    fetched_at: float | None = None


class QueryCache:
    """Keyed store of fetched query results with a per-entry stale flag."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._listeners: list[InvalidationListener] = []

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, stale=False, fetched_at=monotonic())

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def is_stale(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def invalidate(self, key: str) -> None:
        entry = self._entries.setdefault(key, CacheEntry())
        entry.stale = True
        for listener in list(self._listeners):
            try:
                listener(key)
            except Exception:
                logger.exception("cache.listener_failed", key=key)

    def subscribe(self, listener: InvalidationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
