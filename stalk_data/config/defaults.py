"""Default configuration parameters for the stock-data access layer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CacheParams:
    """Symbol cache parameters."""
    ttl_seconds: float = 300.0                       # Freshness window per symbol


@dataclass(frozen=True)
class MetadataParams:
    """Metadata resolution parameters."""
    # Candidate document paths, highest priority first
    candidate_paths: tuple[str, ...] = (
        "stocks/{symbol}",
        "stocks/{symbol}/stats/profile",
    )
    # Accepted spellings of the market cap field
    market_cap_keys: tuple[str, ...] = ("marketCap", "market_cap", "marketcap", "mktCap")


@dataclass(frozen=True)
class PriceParams:
    """Price series parameters."""
    collection_path: str = "prices/{symbol}/daily"
    window_size: int = 252                           # ~one trading year
    # Field name variants per provider, highest priority first
    close_keys: tuple[str, ...] = (
        "close", "c", "price", "currentPrice", "last", "adjClose",
        "previousClose", "prevClose",
    )
    open_keys: tuple[str, ...] = ("open", "o")
    high_keys: tuple[str, ...] = ("high", "h")
    low_keys: tuple[str, ...] = ("low", "l")
    volume_keys: tuple[str, ...] = ("volume", "v")


@dataclass(frozen=True)
class UniverseParams:
    """Tracked symbol universe used for listings."""
    symbols: tuple[str, ...] = ("AAPL", "MSFT", "AMZN", "GOOGL", "NVDA", "TSLA")
    stocks_collection: str = "stocks"


@dataclass(frozen=True)
class UsageParams:
    """Watchlist usage aggregation parameters."""
    users_collection: str = "users"
    sample_limit: int = 500                          # Max user docs read per collection
    top_n: int = 10


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    cache: CacheParams = field(default_factory=CacheParams)
    metadata: MetadataParams = field(default_factory=MetadataParams)
    prices: PriceParams = field(default_factory=PriceParams)
    universe: UniverseParams = field(default_factory=UniverseParams)
    usage: UsageParams = field(default_factory=UsageParams)


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        cache=CacheParams(),
        metadata=MetadataParams(),
        prices=PriceParams(),
        universe=UniverseParams(),
        usage=UsageParams(),
    )
