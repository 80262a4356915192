"""Fixed-window request throttling for the HTTP service."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

# Counters outlive their window slightly so late readers still see them.
EXPIRY_GRACE_SECONDS = 5


class CounterStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str, *, ttl_seconds: int) -> None: ...


class InMemoryCounterStore:
    """Thread-safe key/value store with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: str, *, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)
            self._purge_expired()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]


@dataclass
class RateLimitResult:
    ok: bool
    limit: int
    remaining: int
    retry_after_seconds: int
    window_seconds: int

    def headers(self) -> Dict[str, str]:
        return {
            "retry-after": str(self.retry_after_seconds),
            "x-ratelimit-limit": str(self.limit),
            "x-ratelimit-remaining": str(self.remaining),
        }


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows aligned to the epoch.

    The read-then-write on the store is not atomic across processes; a small
    overshoot is acceptable for cost-control throttling.
    """

    def __init__(
        self,
        store: CounterStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store or InMemoryCounterStore(clock)
        self._clock = clock
        self._lock = threading.Lock()

    def hit(self, key: str, *, limit: int, window_seconds: int) -> RateLimitResult:
        now = self._clock()
        window_id = math.floor(now / window_seconds)
        counter_key = f"rl:{key}:{window_seconds}:{window_id}"

        with self._lock:
            raw = self.store.get(counter_key)
            try:
                previous = int(raw) if raw is not None else 0
            except ValueError:
                previous = 0
            current = max(previous, 0) + 1
            self.store.put(
                counter_key, str(current), ttl_seconds=window_seconds + EXPIRY_GRACE_SECONDS
            )

        reset_in = (window_id + 1) * window_seconds - now
        return RateLimitResult(
            ok=current <= limit,
            limit=limit,
            remaining=max(0, limit - current),
            retry_after_seconds=max(0, math.ceil(reset_in)),
            window_seconds=window_seconds,
        )


__all__ = [
    "CounterStore",
    "FixedWindowRateLimiter",
    "InMemoryCounterStore",
    "RateLimitResult",
]
