import asyncio
import math
from collections import deque
from dataclasses import dataclass
from time import monotonic

SWEEP_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class RateLimitRule:
    limit: int
    window_seconds: int


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: int = 0

    def __bool__(self) -> bool:
        return self.allowed


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by caller (e.g. ``orders:<client ip>``).

    Keys whose window has fully drained are dropped on a periodic sweep, so
    memory tracks only callers active within their window.
    """

    def __init__(self, sweep_interval: float = SWEEP_INTERVAL_SECONDS) -> None:
        self._events: dict[str, deque[float]] = {}
        self._windows: dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._sweep_interval = sweep_interval
        self._last_sweep = monotonic()

    @property
    def tracked_keys(self) -> int:
        return len(self._events)

    async def allow(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        now = monotonic()
        window_start = now - rule.window_seconds

        async with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)

            events = self._events.setdefault(key, deque())
            self._windows[key] = rule.window_seconds
            while events and events[0] <= window_start:
                events.popleft()

            if len(events) >= rule.limit:
                retry_after = math.ceil(events[0] + rule.window_seconds - now)
                return RateLimitDecision(allowed=False, retry_after_seconds=max(retry_after, 1))

            events.append(now)
            return RateLimitDecision(allowed=True)

    async def prune(self) -> None:
        async with self._lock:
            self._sweep(monotonic())

    def _sweep(self, now: float) -> None:
        for key in list(self._events):
            events = self._events[key]
            window_start = now - self._windows.get(key, 0)
            while events and events[0] <= window_start:
                events.popleft()
            if not events:
                del self._events[key]
                self._windows.pop(key, None)
        self._last_sweep = now

    async def reset(self, key: str | None = None) -> None:
        async with self._lock:
            if key is None:
                self._events.clear()
                self._windows.clear()
            else:
                self._events.pop(key, None)
                self._windows.pop(key, None)
