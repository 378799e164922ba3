"""
Time-bounded per-symbol cache for stock details.

Each symbol moves through Empty -> Fresh (load succeeded) -> Stale (TTL
elapsed) -> Empty (evicted on read) or Fresh (reloaded). Staleness is checked
lazily on access; nothing sweeps in the background. Failed loads are never
cached, so the next call retries.

The cache assumes a single cooperative writer per symbol. Loads can be
abandoned through a LoadToken: the in-flight reads are not aborted, but a
result arriving after cancellation is neither cached nor returned.
"""

from typing import Awaitable, Callable, Optional

from ..data.models import CacheEntry, StockDetail
from ..logging.config import get_cache_logger, log_cache_event
from ..utils.time import Clock, elapsed_seconds, monotonic_now

logger = get_cache_logger(__name__)

Loader = Callable[[], Awaitable[StockDetail]]


class LoadToken:
    """Marks one caller's interest in a load; cancel it to abandon the result."""

    def __init__(self, symbol: Optional[str] = None):
        self.symbol = symbol
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"LoadToken(symbol={self.symbol!r}, {state})"


class LatestRequestTracker:
    """
    Tracks the symbol a caller is currently interested in.

    Starting a request for a new symbol cancels the token of the previous
    one, so a slow load for a symbol the caller has moved away from is
    discarded when it finally completes.
    """

    def __init__(self):
        self._current: Optional[LoadToken] = None

    @property
    def current(self) -> Optional[LoadToken]:
        return self._current

    def begin(self, symbol: Optional[str]) -> LoadToken:
        """Cancel the previous request and return a token for the new one."""
        if self._current is not None:
            self._current.cancel()
        self._current = LoadToken(symbol)
        return self._current

    def abandon(self) -> None:
        """Cancel the current request without starting a new one."""
        if self._current is not None:
            self._current.cancel()
            self._current = None


class SymbolCache:
    """TTL cache holding at most one StockDetail per symbol."""

    def __init__(self, ttl_seconds: float, clock: Clock = monotonic_now):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Freshness window; an entry is fresh while its age <= ttl
            clock: Monotonic clock returning seconds
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, symbol: str) -> bool:
        return self.peek(symbol) is not None

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return elapsed_seconds(entry.inserted_at, now) <= self.ttl_seconds

    def peek(self, symbol: str) -> Optional[StockDetail]:
        """Return the fresh cached value without loading or evicting."""
        entry = self._entries.get(symbol)
        if entry is None or not self._is_fresh(entry, self.clock()):
            return None
        return entry.value

    async def get_or_load(self, symbol: str, loader: Loader,
                          token: Optional[LoadToken] = None) -> Optional[StockDetail]:
        """
        Return the fresh cached detail for a symbol, loading it on a miss.

        Args:
            symbol: Normalized symbol used as the cache key
            loader: Coroutine factory producing the detail on a miss
            token: Optional token; once cancelled, the load result is discarded

        Returns:
            The cached or freshly loaded detail, or None if the token was
            cancelled before the load completed

        Raises:
            Whatever the loader raises; nothing is cached in that case
        """
        now = self.clock()
        entry = self._entries.get(symbol)

        if entry is not None:
            age = elapsed_seconds(entry.inserted_at, now)
            if self._is_fresh(entry, now):
                log_cache_event(logger, symbol, "hit", {"age_seconds": age})
                return entry.value
            del self._entries[symbol]
            log_cache_event(logger, symbol, "evicted", {"age_seconds": age, "ttl_seconds": self.ttl_seconds})

        if token is not None and token.cancelled:
            log_cache_event(logger, symbol, "discarded", {"stage": "before_load"})
            return None

        log_cache_event(logger, symbol, "miss")
        value = await loader()

        if token is not None and token.cancelled:
            log_cache_event(logger, symbol, "discarded", {"stage": "after_load"})
            return None

        self._entries[symbol] = CacheEntry(value=value, inserted_at=self.clock())
        log_cache_event(logger, symbol, "stored")
        return value

    def invalidate(self, symbol: str) -> bool:
        """Drop one symbol's entry. Returns True if an entry was removed."""
        removed = self._entries.pop(symbol, None) is not None
        if removed:
            log_cache_event(logger, symbol, "invalidated")
        return removed

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
