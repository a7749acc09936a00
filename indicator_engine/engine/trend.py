"""MACD: difference of two EMAs plus a signal EMA of that difference."""

from __future__ import annotations

from collections.abc import Sequence

from indicator_engine.engine.moving_average import check_period, ema, ema_of_series
from indicator_engine.types import Candle, MACDSeries, Series


def subtract(left: Series, right: Series) -> Series:
    """Element-wise left - right. None wherever either side is None."""
    return [
        a - b if a is not None and b is not None else None
        for a, b in zip(left, right, strict=True)
    ]


def macd(
    candles: Sequence[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDSeries:
    """Moving Average Convergence Divergence.

    The signal line is an EMA over the defined part of the MACD line only,
    so with the defaults it starts at index slow - 1 + signal - 1 = 33.
    """
    check_period("fast", fast)
    check_period("slow", slow)
    check_period("signal", signal)

    macd_line = subtract(ema(candles, fast), ema(candles, slow))
    signal_line = ema_of_series(macd_line, signal)
    histogram = subtract(macd_line, signal_line)
    return MACDSeries(macd=macd_line, signal=signal_line, histogram=histogram)
