"""
Canonical data models for normalized stock data.

This module defines immutable data structures that represent clean, validated
stock data after normalization from the loosely-schematized store documents.
"""

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class MetadataRecord:
    """Company metadata with the market cap already formatted for display."""
    company_name: str
    sector: str
    market_cap: str                                  # e.g. "2.75T"
    source_path: Optional[str] = None                # Document the record was read from
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class PriceBar:
    """Normalized daily OHLCV bar."""
    date: str                   # "YYYY-MM-DD", sorts chronologically
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None   # None means no trade data, not zero volume


@dataclass(frozen=True)
class PriceSeries:
    """Daily bars for one symbol, unique per date and ascending by date."""
    symbol: str
    bars: tuple[PriceBar, ...]

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self):
        return iter(self.bars)

    @property
    def is_empty(self) -> bool:
        return not self.bars

    @property
    def latest(self) -> Optional[PriceBar]:
        """Most recent bar, None if the series is empty."""
        return self.bars[-1] if self.bars else None


@dataclass(frozen=True)
class DerivedSummary:
    """Statistics derived from a price series window."""
    period_high: float
    period_low: float
    last_value: float
    change: float
    change_percent: float
    bar_count: int
    as_of: str                  # Date of the most recent bar


@dataclass(frozen=True)
class StockDetail:
    """Caller-facing merge of metadata and price summary for one symbol."""
    symbol: str
    metadata: MetadataRecord
    summary: DerivedSummary

    @property
    def company_name(self) -> str:
        return self.metadata.company_name

    @property
    def sector(self) -> str:
        return self.metadata.sector

    @property
    def market_cap(self) -> str:
        return self.metadata.market_cap

    def to_dict(self) -> dict[str, Any]:
        """Flat rendering used by presentation layers."""
        result = {
            "symbol": self.symbol,
            "company_name": self.metadata.company_name,
            "sector": self.metadata.sector,
            "market_cap": self.metadata.market_cap,
        }
        result.update(asdict(self.summary))
        return result


@dataclass(frozen=True)
class CacheEntry:
    """A cached stock detail stamped with its insertion time."""
    value: StockDetail
    inserted_at: float


@dataclass(frozen=True)
class TickerCount:
    """How many sampled watchlists contain a ticker."""
    ticker: str
    count: int


@dataclass(frozen=True)
class UsageMetrics:
    """Approximate watchlist usage counts."""
    total_users: Optional[int] = None
    total_watchlist_items: Optional[int] = None
    avg_watchlist_size: Optional[float] = None
    top_tickers: tuple[TickerCount, ...] = ()
