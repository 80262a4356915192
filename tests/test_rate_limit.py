"""Tests for the fixed-window rate limiter."""

from __future__ import annotations

from datetime import UTC, datetime

from repoaudit.rate_limit import FixedWindowRateLimiter, InMemoryCounterStore


class _Clock:
    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _epoch(text: str) -> float:
    return datetime.fromisoformat(text).replace(tzinfo=UTC).timestamp()


def test_allows_up_to_limit_then_blocks() -> None:
    clock = _Clock(_epoch("2026-02-14T00:00:10"))
    limiter = FixedWindowRateLimiter(clock=clock)

    first = limiter.hit("ip", limit=2, window_seconds=60)
    second = limiter.hit("ip", limit=2, window_seconds=60)
    third = limiter.hit("ip", limit=2, window_seconds=60)

    assert first.ok and second.ok
    assert not third.ok
    assert third.remaining == 0
    assert third.retry_after_seconds == 50
    assert third.headers() == {
        "retry-after": "50",
        "x-ratelimit-limit": "2",
        "x-ratelimit-remaining": "0",
    }


def test_new_window_resets_counter() -> None:
    clock = _Clock(_epoch("2026-02-14T00:00:59"))
    limiter = FixedWindowRateLimiter(clock=clock)

    limiter.hit("ip", limit=1, window_seconds=60)
    blocked = limiter.hit("ip", limit=1, window_seconds=60)
    clock.now += 2
    allowed = limiter.hit("ip", limit=1, window_seconds=60)

    assert not blocked.ok
    assert allowed.ok
    assert allowed.remaining == 0


def test_keys_are_counted_independently() -> None:
    limiter = FixedWindowRateLimiter(clock=_Clock(1_000.0))

    limiter.hit("a", limit=1, window_seconds=60)

    assert limiter.hit("b", limit=1, window_seconds=60).ok


def test_store_entries_expire() -> None:
    clock = _Clock(100.0)
    store = InMemoryCounterStore(clock)

    store.put("k", "3", ttl_seconds=10)
    assert store.get("k") == "3"
    clock.now = 111.0
    assert store.get("k") is None


def test_corrupt_counter_restarts_at_one() -> None:
    clock = _Clock(120.0)
    store = InMemoryCounterStore(clock)
    store.put("rl:ip:60:2", "garbage", ttl_seconds=60)
    limiter = FixedWindowRateLimiter(store, clock=clock)

    result = limiter.hit("ip", limit=5, window_seconds=60)

    assert result.ok
    assert result.remaining == 4
