"""
Stalk Data - Stock Data Access Layer

Reads loosely-schematized stock metadata and daily price documents from a
document store, reconciles the storage layouts that have accumulated over
time, normalizes prices into canonical OHLCV bars and derives 52-week
statistics, caching the merged result per symbol.
"""

__version__ = "0.1.0"
__author__ = "Stalk Team"
