"""Market-cap display formatting."""

import math
from typing import Any

from ..errors import InvalidDataError
from .coercion import optional_finite_number

# Checked largest first; a value exactly at a threshold uses that unit
MARKET_CAP_UNITS: tuple[tuple[float, str], ...] = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def format_market_cap(value: Any) -> str:
    """
    Scale a market cap to the largest applicable unit with two decimals.

    Already-formatted strings such as "3.10T" are passed through; numeric
    strings are formatted like numbers. Negative magnitudes scale by their
    absolute value. The unit is chosen on the unrounded magnitude, so
    999.999 renders as "1000.00" rather than "1.00K".

    Examples:
        2_750_000_000_000 -> "2.75T"
        980_000_000       -> "980.00M"
        500               -> "500.00"

    Raises:
        InvalidDataError: if the value is neither a non-empty string nor a finite number
    """
    number = optional_finite_number(value)

    if number is None:
        if isinstance(value, str) and value.strip() and not _is_non_finite_literal(value):
            return value.strip()
        raise InvalidDataError("market cap", f"cannot format {value!r}", raw_value=value)

    magnitude = math.fabs(number)
    for threshold, suffix in MARKET_CAP_UNITS:
        if magnitude >= threshold:
            return f"{number / threshold:.2f}{suffix}"

    return f"{number:.2f}"


def _is_non_finite_literal(text: str) -> bool:
    try:
        return not math.isfinite(float(text))
    except ValueError:
        return False
