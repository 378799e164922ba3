"""52-week summary statistics over a daily price series"""

import math
from typing import Iterable, Optional, Union

from ..config.defaults import PriceParams
from ..errors import InvalidDataError, NotFoundError
from ..data.models import DerivedSummary, PriceBar, PriceSeries

DEFAULT_WINDOW_SIZE = 252  # ~one trading year


def summarize(series: Union[PriceSeries, Iterable[PriceBar]],
              window_size: Optional[int] = DEFAULT_WINDOW_SIZE,
              symbol: Optional[str] = None) -> DerivedSummary:
    """
    Derive period extrema and latest change from an ascending series.

    Walks the most recent ``window_size`` bars once, tracking the running
    max of highs, the running min of lows and the last two closes.

    change = last close - previous close (0 for a single bar)
    change_percent = change / previous close * 100 (0 when previous close is 0)

    Args:
        series: Bars in ascending date order
        window_size: Number of most recent bars to use, None for all
        symbol: Symbol, for error context only

    Returns:
        DerivedSummary for the window

    Raises:
        NotFoundError: if the series is empty
        InvalidDataError: if extrema cannot be computed
        ValueError: if window_size is less than 1
    """
    if isinstance(series, PriceSeries):
        symbol = symbol or series.symbol
        bars = series.bars
    else:
        bars = tuple(series)

    if window_size is not None:
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        bars = bars[-window_size:]

    if not bars:
        raise NotFoundError("price series", symbol)

    period_high = -math.inf
    period_low = math.inf
    last_close: Optional[float] = None
    previous_close: Optional[float] = None

    for bar in bars:
        period_high = max(period_high, bar.high)
        period_low = min(period_low, bar.low)
        previous_close = last_close
        last_close = bar.close

    if previous_close is None:
        previous_close = last_close

    if not (math.isfinite(period_high) and math.isfinite(period_low)):
        raise InvalidDataError("price summary", "extrema are not finite", symbol=symbol)

    change = last_close - previous_close
    change_percent = (change / previous_close * 100) if previous_close else 0.0

    return DerivedSummary(
        period_high=period_high,
        period_low=period_low,
        last_value=last_close,
        change=change,
        change_percent=change_percent,
        bar_count=len(bars),
        as_of=bars[-1].date,
    )


class PriceSummaryCalculator:
    """Summary calculator bound to the configured window"""

    def __init__(self, params: Optional[PriceParams] = None):
        self.params = params or PriceParams()

    @property
    def window_size(self) -> int:
        return self.params.window_size

    def calculate(self, series: PriceSeries) -> DerivedSummary:
        return summarize(series, self.window_size)
