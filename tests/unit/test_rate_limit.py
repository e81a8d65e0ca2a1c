import asyncio

import pytest

from app.core.rate_limit import InMemoryRateLimiter, RateLimitRule


@pytest.mark.asyncio
async def test_rate_limiter_blocks_after_limit() -> None:
    limiter = InMemoryRateLimiter()
    rule = RateLimitRule(limit=2, window_seconds=60)

    assert await limiter.allow("orders:10.0.0.1", rule)
    assert await limiter.allow("orders:10.0.0.1", rule)

    decision = await limiter.allow("orders:10.0.0.1", rule)
    assert not decision
    assert 1 <= decision.retry_after_seconds <= 60


@pytest.mark.asyncio
async def test_rate_limiter_keys_are_independent() -> None:
    limiter = InMemoryRateLimiter()
    rule = RateLimitRule(limit=1, window_seconds=60)

    assert await limiter.allow("login:10.0.0.1", rule)
    assert await limiter.allow("login:10.0.0.2", rule)
    assert not await limiter.allow("login:10.0.0.1", rule)


@pytest.mark.asyncio
async def test_rate_limiter_resets_after_window() -> None:
    limiter = InMemoryRateLimiter()
    rule = RateLimitRule(limit=1, window_seconds=1)

    assert await limiter.allow("orders:10.0.0.3", rule)
    assert not await limiter.allow("orders:10.0.0.3", rule)

    await asyncio.sleep(1.05)
    assert await limiter.allow("orders:10.0.0.3", rule)


@pytest.mark.asyncio
async def test_rate_limiter_manual_reset() -> None:
    limiter = InMemoryRateLimiter()
    rule = RateLimitRule(limit=1, window_seconds=60)

    assert await limiter.allow("orders:10.0.0.4", rule)
    await limiter.reset("orders:10.0.0.4")
    assert await limiter.allow("orders:10.0.0.4", rule)


@pytest.mark.asyncio
async def test_drained_keys_are_dropped() -> None:
    limiter = InMemoryRateLimiter()
    rule = RateLimitRule(limit=1, window_seconds=1)

    assert await limiter.allow("orders:10.0.0.5", rule)
    assert await limiter.allow("orders:10.0.0.6", rule)
    assert limiter.tracked_keys == 2

    await asyncio.sleep(1.05)
    await limiter.prune()

    assert limiter.tracked_keys == 0


@pytest.mark.asyncio
async def test_sweep_runs_during_allow() -> None:
    limiter = InMemoryRateLimiter(sweep_interval=0)
    rule = RateLimitRule(limit=1, window_seconds=1)

    for index in range(5):
        assert await limiter.allow(f"orders:10.1.0.{index}", rule)

    await asyncio.sleep(1.05)
    assert await limiter.allow("orders:10.1.0.99", rule)

    assert limiter.tracked_keys == 1
