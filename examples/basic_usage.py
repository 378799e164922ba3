#!/usr/bin/env python3
"""
Basic Usage Example - Stalk Data Access Layer

This script demonstrates the access layer against a YAML fixture store.
It shows how to:
- Build the service from configuration
- Read a merged stock detail (metadata + 52-week summary)
- List the configured universe with partial-failure semantics
- Read a full price series for charting
- Collect watchlist usage metrics as a privileged caller

Run: python examples/basic_usage.py
"""

import asyncio
from pathlib import Path

from stalk_data.errors import DataQualityError
from stalk_data.logging import configure_logging
from stalk_data.service import StockDataService
from stalk_data.store import InMemoryDocumentStore

FIXTURE = Path(__file__).parent / "fixtures" / "sample_store.yaml"


def print_detail(detail) -> None:
    """Print a stock detail in a readable format."""
    summary = detail.summary
    print(f"📈 {detail.symbol} - {detail.company_name} ({detail.sector})")
    print(f"  Market Cap: {detail.market_cap}")
    print(f"  Last: {summary.last_value:.2f} as of {summary.as_of}")
    print(f"  Change: {summary.change:+.2f} ({summary.change_percent:+.3f}%)")
    print(f"  52W Range: {summary.period_low:.2f} - {summary.period_high:.2f}")
    print("-" * 50)


async def run_demo() -> None:
    print("1. Loading fixture store and building the service...")
    store = InMemoryDocumentStore.from_yaml(FIXTURE)
    service = StockDataService.from_config(store, overrides={"universe": {"symbols": ["AAPL", "MSFT", "TSLA"]}})

    print("\n2. Reading a single stock detail...")
    detail = await service.get_stock_detail(" aapl ")
    print_detail(detail)

    reads_before = store.read_count()
    await service.get_stock_detail("AAPL")
    print(f"   Second read served from cache: {store.read_count() == reads_before}")

    print("\n3. Listing the universe (TSLA has incomplete metadata)...")
    for item in await service.get_all_summaries():
        print_detail(item)

    print("\n4. Full price series for charting...")
    series = await service.get_price_series("MSFT")
    for bar in series:
        print(f"  {bar.date}  O={bar.open:.2f} H={bar.high:.2f} L={bar.low:.2f} C={bar.close:.2f} V={bar.volume}")

    print("\n5. A missing symbol surfaces a typed error...")
    try:
        await service.get_stock_detail("ZZZZ")
    except DataQualityError as e:
        print(f"  {type(e).__name__}: {e}")

    print("\n6. Usage metrics (privileged caller)...")
    metrics = await service.get_usage_metrics(is_privileged=True)
    print(f"  Users: {metrics.total_users}, watchlist items: {metrics.total_watchlist_items}, "
          f"avg size: {metrics.avg_watchlist_size}")
    for entry in metrics.top_tickers:
        print(f"  {entry.ticker}: {entry.count}")


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")
    print("🚀 Stalk Data Access Layer - Basic Usage Demo")
    print("=" * 60)
    asyncio.run(run_demo())
    print("\n✅ Demo complete")


if __name__ == "__main__":
    main()
