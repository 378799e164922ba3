"""
Price series normalization from provider-specific daily records.

Different data providers wrote daily documents with different field names
('close' vs 'c' vs 'price', ...). Every record is mapped into a canonical
PriceBar through one priority-ordered lookup per field.

Fallback rules:
- close is taken from the close-like fields before previous-close-like ones
- open, high and low each fall back to that close when absent or non-finite
- close itself never falls back to open/high/low
- volume stays None when absent, so "no trade data" differs from zero volume
"""

from typing import Any, Iterable, Mapping, Optional

import structlog

from ..config.defaults import PriceParams
from ..errors import InvalidDataError
from ..store.base import DocumentSnapshot
from ..utils.time import to_date_key
from .coercion import first_optional_numeric, first_present_numeric
from .models import PriceBar, PriceSeries

logger = structlog.get_logger(__name__)


class PriceSeriesNormalizer:
    """Maps raw daily price documents into canonical bars and series."""

    def __init__(self, params: Optional[PriceParams] = None):
        self.params = params or PriceParams()

    def normalize_bar(self, raw: Mapping[str, Any], date_key: Any,
                      symbol: Optional[str] = None) -> PriceBar:
        """
        Normalize one raw daily record.

        Args:
            raw: Raw document payload
            date_key: Document id or date of the period
            symbol: Symbol, for error context only

        Raises:
            InvalidDataError: if the date is not a calendar day or no usable close exists
        """
        try:
            date = to_date_key(date_key)
        except ValueError:
            raise InvalidDataError(
                "price bar date", f"not a calendar day: {date_key!r}",
                symbol=symbol, raw_value=date_key,
            ) from None

        try:
            close = first_present_numeric(raw, self.params.close_keys, label="close")
        except InvalidDataError as e:
            raise InvalidDataError(
                "price bar", f"no usable price on {date}",
                symbol=symbol, context={"date": date, **e.context},
            ) from e

        def or_close(keys) -> float:
            value = first_optional_numeric(raw, keys)
            return close if value is None else value

        return PriceBar(
            date=date,
            open=or_close(self.params.open_keys),
            high=or_close(self.params.high_keys),
            low=or_close(self.params.low_keys),
            close=close,
            volume=first_optional_numeric(raw, self.params.volume_keys),
        )

    def build_series(self, symbol: str, snapshots: Iterable[DocumentSnapshot]) -> PriceSeries:
        """
        Normalize daily documents into an ascending, date-unique series.

        Ordering comes from sorting on the date key, never from the order in
        which documents arrived. When several documents map to the same day,
        the one with the largest document id wins regardless of read order.
        """
        by_date: dict[str, tuple[str, PriceBar]] = {}
        for snapshot in snapshots:
            if not snapshot.exists:
                continue
            bar = self.normalize_bar(snapshot.data, snapshot.id, symbol=symbol)
            current = by_date.get(bar.date)
            if current is not None:
                logger.debug("Duplicate price date", symbol=symbol, date=bar.date,
                             kept=max(current[0], snapshot.id))
                if current[0] >= snapshot.id:
                    continue
            by_date[bar.date] = (snapshot.id, bar)

        bars = tuple(by_date[date][1] for date in sorted(by_date))
        return PriceSeries(symbol=symbol, bars=bars)


_default_normalizer = PriceSeriesNormalizer()


def normalize_bar(raw: Mapping[str, Any], date_key: Any) -> PriceBar:
    """Normalize one raw daily record with the default field tables."""
    return _default_normalizer.normalize_bar(raw, date_key)


def build_series(symbol: str, snapshots: Iterable[DocumentSnapshot]) -> PriceSeries:
    """Normalize daily documents with the default field tables."""
    return _default_normalizer.build_series(symbol, snapshots)
