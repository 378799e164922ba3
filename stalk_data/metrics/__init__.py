"""
Derived statistics: price series summaries and watchlist usage counts.
"""

from .price_summary import PriceSummaryCalculator, summarize
from .usage import UsageAggregator, tally_watchlists

__all__ = ["PriceSummaryCalculator", "summarize", "UsageAggregator", "tally_watchlists"]
