"""
Tests for watchlist usage aggregation.

Verifies the privilege gate, sample-based tallies and the ticker ranking.
"""

import pytest

from stalk_data.config.defaults import UsageParams
from stalk_data.data.models import TickerCount, UsageMetrics
from stalk_data.metrics.usage import UsageAggregator, tally_watchlists
from stalk_data.store.base import DocumentSnapshot
from stalk_data.store.memory import InMemoryDocumentStore


def user(uid, **data):
    return DocumentSnapshot(id=uid, exists=True, data=data)


@pytest.fixture
def user_store():
    return InMemoryDocumentStore({
        "users/u1": {"watchlist": ["AAPL", "msft", "TSLA"]},
        "users/u2": {"watchlist": ["AAPL"]},
        "users/u3": {"watchlist": ["msft", " aapl "]},
        "users/u4": {"email": "no-watchlist@example.com"},
    })


class TestTallyWatchlists:
    """Test tally_watchlists."""

    def test_counts_and_average(self):
        total, avg, top = tally_watchlists([
            user("u1", watchlist=["AAPL", "MSFT"]),
            user("u2", watchlist=["AAPL"]),
            user("u3", watchlist=[]),
        ])

        assert total == 3
        assert avg == 1.0
        assert top == (TickerCount("AAPL", 2), TickerCount("MSFT", 1))

    def test_users_without_list_watchlist_are_skipped(self):
        total, avg, _ = tally_watchlists([
            user("u1", watchlist=["AAPL", "MSFT", "NVDA"]),
            user("u2", watchlist="AAPL"),
            user("u3"),
        ])

        assert total == 3
        assert avg == 3.0

    def test_average_rounded_to_two_places(self):
        _, avg, _ = tally_watchlists([
            user("u1", watchlist=["A"]),
            user("u2", watchlist=["B"]),
            user("u3", watchlist=["C", "D"]),
        ])

        assert avg == 1.33

    def test_ties_broken_alphabetically_and_capped(self):
        _, _, top = tally_watchlists(
            [user("u1", watchlist=["TSLA", "AMZN", "NVDA"])], top_n=2
        )

        assert [entry.ticker for entry in top] == ["AMZN", "NVDA"]

    def test_blank_entries_count_as_items_only(self):
        total, _, top = tally_watchlists([user("u1", watchlist=["AAPL", "", None])])

        assert total == 3
        assert top == (TickerCount("AAPL", 1),)

    def test_no_users(self):
        assert tally_watchlists([]) == (0, 0.0, ())


class TestUsageAggregator:
    """Test UsageAggregator."""

    @pytest.mark.asyncio
    async def test_non_privileged_gets_defaults_without_reads(self, user_store):
        metrics = await UsageAggregator(user_store).collect(is_privileged=False)

        assert metrics == UsageMetrics()
        assert metrics.total_users is None
        assert user_store.read_count() == 0

    @pytest.mark.asyncio
    async def test_privileged_collects_metrics(self, user_store):
        metrics = await UsageAggregator(user_store).collect(is_privileged=True)

        assert metrics.total_users == 4
        assert metrics.total_watchlist_items == 6
        assert metrics.avg_watchlist_size == 2.0
        assert metrics.top_tickers[0] == TickerCount("AAPL", 3)
        assert metrics.top_tickers[1] == TickerCount("MSFT", 2)

    @pytest.mark.asyncio
    async def test_sample_limit_caps_documents_read(self, user_store):
        aggregator = UsageAggregator(user_store, UsageParams(sample_limit=1))

        metrics = await aggregator.collect(is_privileged=True)

        # Total users is an exact count; tallies come from the capped sample
        assert metrics.total_users == 4
        assert metrics.total_watchlist_items == 3

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        store = InMemoryDocumentStore(failures={"users": ConnectionError("down")})

        with pytest.raises(ConnectionError):
            await UsageAggregator(store).collect(is_privileged=True)
