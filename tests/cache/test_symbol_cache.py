"""
Tests for the per-symbol TTL cache.

Verifies hit/miss/stale transitions against a manual clock, that failed
loads are never cached, and that abandoned loads are discarded.
"""

import asyncio

import pytest

from stalk_data.cache.symbol_cache import LatestRequestTracker, LoadToken, SymbolCache


class CountingLoader:
    """Loader stub that records calls and returns a fresh object per call."""

    def __init__(self, failures=0):
        self.calls = 0
        self.failures = failures

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("store unavailable")
        return {"load": self.calls}


class TestSymbolCache:
    """Test SymbolCache state transitions."""

    @pytest.mark.asyncio
    async def test_miss_then_hit_within_ttl(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()

        first = await cache.get_or_load("AAPL", loader)
        clock.advance(120)
        second = await cache.get_or_load("AAPL", loader)

        assert loader.calls == 1
        assert second is first

    @pytest.mark.asyncio
    async def test_age_equal_to_ttl_is_fresh(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()

        await cache.get_or_load("AAPL", loader)
        clock.advance(300)

        assert "AAPL" in cache
        await cache.get_or_load("AAPL", loader)
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_stale_entry_reloaded_exactly_once(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()

        await cache.get_or_load("AAPL", loader)
        clock.advance(301)

        assert "AAPL" not in cache
        reloaded = await cache.get_or_load("AAPL", loader)
        again = await cache.get_or_load("AAPL", loader)

        assert loader.calls == 2
        assert reloaded == {"load": 2}
        assert again is reloaded

    @pytest.mark.asyncio
    async def test_insertion_time_taken_after_load(self, clock):
        """A slow load starts its freshness window when it completes."""
        cache = SymbolCache(ttl_seconds=10, clock=clock)

        async def slow_loader():
            clock.advance(60)
            return "detail"

        await cache.get_or_load("AAPL", slow_loader)
        clock.advance(10)

        assert cache.peek("AAPL") == "detail"

    @pytest.mark.asyncio
    async def test_failed_load_not_cached(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader(failures=1)

        with pytest.raises(RuntimeError):
            await cache.get_or_load("AAPL", loader)

        assert len(cache) == 0
        assert await cache.get_or_load("AAPL", loader) == {"load": 2}
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_symbols_cached_independently(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()

        await cache.get_or_load("AAPL", loader)
        await cache.get_or_load("MSFT", loader)

        assert loader.calls == 2
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_zero_ttl_serves_only_same_instant(self, clock):
        cache = SymbolCache(ttl_seconds=0, clock=clock)
        loader = CountingLoader()

        await cache.get_or_load("AAPL", loader)
        await cache.get_or_load("AAPL", loader)
        clock.advance(0.5)
        await cache.get_or_load("AAPL", loader)

        assert loader.calls == 2

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            SymbolCache(ttl_seconds=-1)

    @pytest.mark.asyncio
    async def test_invalidate_and_clear(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()
        await cache.get_or_load("AAPL", loader)
        await cache.get_or_load("MSFT", loader)

        assert cache.invalidate("AAPL") is True
        assert cache.invalidate("AAPL") is False
        assert "AAPL" not in cache

        cache.clear()
        assert len(cache) == 0


class TestAbandonedLoads:
    """Test token-based discarding of late results."""

    @pytest.mark.asyncio
    async def test_cancelled_during_load_is_discarded(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        token = LoadToken("AAPL")

        async def loader():
            token.cancel()
            return "late detail"

        result = await cache.get_or_load("AAPL", loader, token=token)

        assert result is None
        assert "AAPL" not in cache

    @pytest.mark.asyncio
    async def test_cancelled_before_load_skips_loader(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()
        token = LoadToken("AAPL")
        token.cancel()

        assert await cache.get_or_load("AAPL", loader, token=token) is None
        assert loader.calls == 0

    @pytest.mark.asyncio
    async def test_fresh_hit_ignores_token(self, clock):
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        loader = CountingLoader()
        await cache.get_or_load("AAPL", loader)

        token = LoadToken("AAPL")
        token.cancel()

        assert await cache.get_or_load("AAPL", loader, token=token) == {"load": 1}

    @pytest.mark.asyncio
    async def test_switching_symbols_discards_slow_load(self, clock):
        """Moving to a new symbol mid-load drops the previous symbol's result."""
        cache = SymbolCache(ttl_seconds=300, clock=clock)
        tracker = LatestRequestTracker()
        release = asyncio.Event()

        async def slow_loader():
            await release.wait()
            return "AAPL detail"

        async def fast_loader():
            return "MSFT detail"

        aapl_token = tracker.begin("AAPL")
        aapl_task = asyncio.create_task(cache.get_or_load("AAPL", slow_loader, token=aapl_token))
        await asyncio.sleep(0)

        msft_token = tracker.begin("MSFT")
        msft = await cache.get_or_load("MSFT", fast_loader, token=msft_token)
        release.set()

        assert await aapl_task is None
        assert msft == "MSFT detail"
        assert "AAPL" not in cache
        assert "MSFT" in cache


class TestLatestRequestTracker:
    """Test LatestRequestTracker."""

    def test_begin_cancels_previous(self):
        tracker = LatestRequestTracker()

        first = tracker.begin("AAPL")
        second = tracker.begin("MSFT")

        assert first.cancelled
        assert not second.cancelled
        assert tracker.current is second

    def test_abandon(self):
        tracker = LatestRequestTracker()
        token = tracker.begin("AAPL")

        tracker.abandon()

        assert token.cancelled
        assert tracker.current is None
        tracker.abandon()
