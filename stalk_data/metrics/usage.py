"""Approximate watchlist usage counts from a capped sample of user documents"""

import asyncio
from collections import Counter
from typing import Any, Iterable, Optional

import structlog

from ..config.defaults import UsageParams
from ..data.models import TickerCount, UsageMetrics
from ..store.base import DocumentSnapshot, DocumentStore
from ..utils.symbols import normalize_symbol

logger = structlog.get_logger(__name__)

DEFAULT_METRICS = UsageMetrics()


def tally_watchlists(users: Iterable[DocumentSnapshot], top_n: int = 10) -> tuple[int, float, tuple[TickerCount, ...]]:
    """
    Tally watchlist sizes and ticker popularity.

    Only users whose ``watchlist`` is a list are sampled. Blank entries count
    toward the item total but not toward any ticker.

    Returns:
        (total_watchlist_items, avg_watchlist_size, top_tickers)
    """
    total_items = 0
    sampled_users = 0
    tally: Counter = Counter()

    for user in users:
        watchlist: Any = user.data.get("watchlist")
        if not isinstance(watchlist, list):
            continue

        sampled_users += 1
        total_items += len(watchlist)

        for entry in watchlist:
            ticker = normalize_symbol(entry) if entry else None
            if ticker:
                tally[ticker] += 1

    avg_size = round(total_items / sampled_users, 2) if sampled_users else 0.0

    ranked = sorted(tally.items(), key=lambda item: (-item[1], item[0]))[:top_n]
    top_tickers = tuple(TickerCount(ticker=ticker, count=count) for ticker, count in ranked)

    return total_items, avg_size, top_tickers


class UsageAggregator:
    """Collects watchlist usage metrics for privileged callers."""

    def __init__(self, store: DocumentStore, params: Optional[UsageParams] = None):
        self.store = store
        self.params = params or UsageParams()

    async def collect(self, is_privileged: bool) -> UsageMetrics:
        """
        Collect usage metrics.

        Non-privileged callers get the default metrics without any store
        reads. Store failures propagate to the caller.
        """
        if not is_privileged:
            return DEFAULT_METRICS

        collection = self.params.users_collection
        total_users, users = await asyncio.gather(
            self.store.count(collection),
            self.store.scan(collection, limit=self.params.sample_limit),
        )

        total_items, avg_size, top_tickers = tally_watchlists(users, self.params.top_n)

        logger.info(
            "Collected usage metrics",
            total_users=total_users,
            sampled_users=len(users),
            total_watchlist_items=total_items,
        )

        return UsageMetrics(
            total_users=total_users,
            total_watchlist_items=total_items,
            avg_watchlist_size=avg_size,
            top_tickers=top_tickers,
        )
