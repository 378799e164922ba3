"""
Per-symbol TTL cache and load abandonment tokens.
"""

from .symbol_cache import LatestRequestTracker, LoadToken, SymbolCache

__all__ = ["LatestRequestTracker", "LoadToken", "SymbolCache"]
