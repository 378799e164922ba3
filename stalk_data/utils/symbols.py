"""Instrument symbol normalization."""

from typing import Any, Optional


def normalize_symbol(value: Any) -> Optional[str]:
    """
    Normalize a caller-supplied symbol into its canonical form.

    Symbols are trimmed and uppercased. ``None`` and whitespace-only input
    return ``None``: that is "no request", not a failed request.

    Args:
        value: Raw symbol (e.g. ' aapl ')

    Returns:
        Canonical symbol (e.g. 'AAPL') or None when there is nothing to look up
    """
    if value is None:
        return None
    symbol = str(value).strip().upper()
    return symbol or None
