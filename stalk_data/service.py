"""
Stock data service.

Caller-facing entry point of the access layer. Coordinates the pipeline:
Symbol → Cache → (Metadata Resolver ∥ Price Read → Normalize → Summarize) → StockDetail
"""

import asyncio
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .cache.symbol_cache import LoadToken, SymbolCache
from .config.defaults import DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .data.metadata import MetadataResolver
from .data.models import DerivedSummary, PriceSeries, StockDetail, UsageMetrics
from .data.normalizer import PriceSeriesNormalizer
from .errors import MissingIndexError, NotFoundError, QueryCapabilityError
from .metrics.price_summary import PriceSummaryCalculator
from .metrics.usage import UsageAggregator
from .store.base import DocumentSnapshot, DocumentStore
from .utils.symbols import normalize_symbol
from .utils.time import Clock, monotonic_now

logger = structlog.get_logger(__name__)


class StockDataService:
    """
    Read-only stock data access for presentation layers.

    Construct once per process and share: the symbol cache it owns is the
    process-wide cache.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[DefaultConfig] = None,
        clock: Clock = monotonic_now,
    ) -> None:
        """
        Initialize the service.

        Args:
            store: Document store collaborator
            config: Typed configuration, defaults when omitted
            clock: Monotonic clock for cache freshness
        """
        self.logger = logger
        self.store = store
        self.config = config or get_default_config()

        self.metadata_resolver = MetadataResolver(store, self.config.metadata)
        self.normalizer = PriceSeriesNormalizer(self.config.prices)
        self.summary_calculator = PriceSummaryCalculator(self.config.prices)
        self.usage_aggregator = UsageAggregator(store, self.config.usage)
        self.cache = SymbolCache(self.config.cache.ttl_seconds, clock=clock)

        self.logger.info(
            "Stock data service initialized",
            ttl_seconds=self.config.cache.ttl_seconds,
            window_size=self.config.prices.window_size,
            universe_size=len(self.config.universe.symbols),
        )

    @classmethod
    def from_config(
        cls,
        store: DocumentStore,
        config_dir: Optional[Union[str, Path]] = None,
        overrides: Optional[dict[str, Any]] = None,
        clock: Clock = monotonic_now,
    ) -> "StockDataService":
        """Create a service from settings.yaml plus runtime overrides."""
        loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        return cls(store, loader.build(overrides), clock=clock)

    async def get_stock_detail(self, symbol: Any,
                               token: Optional[LoadToken] = None) -> Optional[StockDetail]:
        """
        Get metadata and price summary for one symbol.

        A missing or blank symbol is "no request": returns None without any
        store reads. None is also returned when ``token`` was cancelled
        before the load finished.

        Raises:
            NotFoundError: metadata or price series is missing
            InvalidDataError: a located document failed validation
            QueryCapabilityError: the store cannot serve the ordered price read
        """
        normalized = normalize_symbol(symbol)
        if normalized is None:
            return None

        return await self.cache.get_or_load(
            normalized, lambda: self._load_detail(normalized), token=token
        )

    async def get_all_summaries(self) -> list[StockDetail]:
        """
        Get details for every symbol in the configured universe.

        Partial listing on partial failure: a symbol whose load fails for
        any reason is left out of the result and logged; the remaining
        symbols are returned in universe order.
        """
        symbols = self.config.universe.symbols
        results = await asyncio.gather(
            *(self.get_stock_detail(symbol) for symbol in symbols),
            return_exceptions=True,
        )

        details = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self.logger.warning(
                    "Symbol excluded from listing",
                    symbol=symbol,
                    error_type=type(result).__name__,
                    error=str(result),
                )
                continue
            if result is not None:
                details.append(result)

        return details

    async def get_price_series(self, symbol: Any) -> Optional[PriceSeries]:
        """
        Get the full normalized daily series for charting.

        Returns None for a missing or blank symbol.

        Raises:
            NotFoundError: the symbol has no price documents
            InvalidDataError: a daily document has no usable price
        """
        normalized = normalize_symbol(symbol)
        if normalized is None:
            return None

        path = self.config.prices.collection_path.format(symbol=normalized)
        snapshots = await self.store.scan(path)
        if not snapshots:
            raise NotFoundError("price series", normalized, context={"path": path})

        return self.normalizer.build_series(normalized, snapshots)

    async def list_symbols(self) -> list[str]:
        """Symbols that have a root stock document, sorted."""
        snapshots = await self.store.scan(self.config.universe.stocks_collection)
        symbols = {normalize_symbol(snapshot.id) for snapshot in snapshots}
        return sorted(symbol for symbol in symbols if symbol)

    async def get_usage_metrics(self, is_privileged: bool) -> UsageMetrics:
        """Watchlist usage counts; defaults without reads for non-privileged callers."""
        return await self.usage_aggregator.collect(is_privileged)

    def invalidate(self, symbol: Any) -> bool:
        """Drop a symbol's cached detail so the next request reloads it."""
        normalized = normalize_symbol(symbol)
        return normalized is not None and self.cache.invalidate(normalized)

    async def _load_detail(self, symbol: str) -> StockDetail:
        """Read metadata and price summary concurrently and merge them."""
        metadata, summary = await asyncio.gather(
            self.metadata_resolver.resolve(symbol),
            self._load_summary(symbol),
        )

        self.logger.info(
            "Loaded stock detail",
            symbol=symbol,
            metadata_path=metadata.source_path,
            bar_count=summary.bar_count,
            as_of=summary.as_of,
        )

        return StockDetail(symbol=symbol, metadata=metadata, summary=summary)

    async def _load_summary(self, symbol: str) -> DerivedSummary:
        series = await self._read_recent_series(symbol)
        return self.summary_calculator.calculate(series)

    async def _read_recent_series(self, symbol: str) -> PriceSeries:
        """
        Read the most recent daily documents covering one window of days.

        The read is capped by document count. Several documents may map to
        the same day, so the cap is raised until the window holds
        ``window_size`` distinct days or the collection is exhausted. Ids
        arrive in descending order, so a cap that splits a day only drops
        documents that would lose the per-day tie-break anyway.
        """
        window_size = self.config.prices.window_size
        path = self.config.prices.collection_path.format(symbol=symbol)
        limit = window_size

        while True:
            snapshots = await self._scan_recent(symbol, path, limit)
            if not snapshots:
                raise NotFoundError("price series", symbol, context={"path": path})

            series = self.normalizer.build_series(symbol, snapshots)
            if len(snapshots) < limit or len(series) >= window_size:
                return series

            limit += window_size - len(series)
            self.logger.debug("Widening price read for duplicate days", symbol=symbol, limit=limit)

    async def _scan_recent(self, symbol: str, path: str, limit: int) -> list[DocumentSnapshot]:
        try:
            return await self.store.scan(
                path, order_by_id=True, descending=True, limit=limit
            )
        except MissingIndexError as e:
            raise QueryCapabilityError(
                f"Price history for {symbol} needs an ordered, capped read of {path}; "
                "the document store reports a missing index for it. Build the index "
                "and retry.",
                path=path,
                operation="scan_ordered_by_id",
                context={"symbol": symbol, "limit": limit},
            ) from e
