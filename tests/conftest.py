"""Pytest configuration and shared fixtures."""

import pytest
from typing import Dict, Any

from stalk_data.store.memory import InMemoryDocumentStore
from stalk_data.utils.time import ManualClock


@pytest.fixture
def apple_metadata() -> Dict[str, Any]:
    """Root stock document in the current schema."""
    return {
        "companyName": "Apple Inc.",
        "sector": "Technology",
        "marketCap": 2750000000000,
    }


@pytest.fixture
def sample_documents(apple_metadata) -> Dict[str, Dict[str, Any]]:
    """Documents covering both metadata layouts and several price providers."""
    return {
        "stocks/AAPL": apple_metadata,
        "stocks/MSFT/stats/profile": {
            "companyName": "Microsoft",
            "sector": "Technology",
            "marketCap": "3.10T",
        },
        "prices/AAPL/daily/2020-10-19": {"c": 100, "h": 101, "l": 99},
        "prices/AAPL/daily/2020-10-20": {"c": 105, "h": 106, "l": 102},
        "prices/AAPL/daily/2020-10-21": {"c": 103, "h": 107, "l": 98},
        "prices/MSFT/daily/2024-10-20": {"price": 410},
        "prices/MSFT/daily/2024-10-21": {"price": 405},
        "prices/MSFT/daily/2024-10-22": {"price": 420},
        "prices/MSFT/daily/2024-10-23": {"price": 395},
    }


@pytest.fixture
def store(sample_documents) -> InMemoryDocumentStore:
    """In-memory store loaded with the sample documents."""
    return InMemoryDocumentStore(sample_documents)


@pytest.fixture
def clock() -> ManualClock:
    """Manually advanced monotonic clock."""
    return ManualClock(start=1000.0)
