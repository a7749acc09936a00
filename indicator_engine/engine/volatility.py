"""Volatility measures: Bollinger Bands and Average True Range."""

from __future__ import annotations

import math
from collections.abc import Sequence

from indicator_engine.engine.momentum import wilder_step
from indicator_engine.engine.moving_average import check_period, closes, sma
from indicator_engine.errors import InvalidPeriodError
from indicator_engine.types import BollingerSeries, Candle, Series


def population_std(values: Sequence[float], mean: float) -> float:
    return math.sqrt(sum((v - mean) * (v - mean) for v in values) / len(values))


def bollinger_bands(
    candles: Sequence[Candle],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerSeries:
    """SMA middle band with bands `std_dev` population deviations away.

    Undefined before period - 1. Wherever defined,
    lower <= middle <= upper.
    """
    check_period("period", period)
    if std_dev < 0:
        raise InvalidPeriodError("std_dev", std_dev, minimum=0)

    prices = closes(candles)
    middle = sma(candles, period)
    upper: Series = []
    lower: Series = []
    for i, mid in enumerate(middle):
        if mid is None:
            upper.append(None)
            lower.append(None)
            continue
        sigma = population_std(prices[i - period + 1 : i + 1], mid)
        upper.append(mid + std_dev * sigma)
        lower.append(mid - std_dev * sigma)
    return BollingerSeries(upper=upper, middle=middle, lower=lower)


def true_range_of(candle: Candle, prev_close: float) -> float:
    return max(
        candle.high - candle.low,
        abs(candle.high - prev_close),
        abs(candle.low - prev_close),
    )


def true_range(candles: Sequence[Candle]) -> Series:
    """True Range per candle. None at index 0 (no previous close)."""
    result: Series = [None] * len(candles)
    for i in range(1, len(candles)):
        result[i] = true_range_of(candles[i], candles[i - 1].close)
    return result


def atr(candles: Sequence[Candle], period: int = 14) -> Series:
    """Average True Range with Wilder smoothing.

    atr[period] is the mean true range of candles 1..period. Each later
    position smooths in the true range of its own candle. None before
    index `period`, and everywhere when there are not more than `period`
    candles.
    """
    check_period("period", period)
    result: Series = [None] * len(candles)
    if len(candles) <= period:
        return result

    # ranges[j] is the true range of candle j + 1
    ranges = [
        true_range_of(candles[i], candles[i - 1].close)
        for i in range(1, len(candles))
    ]
    prev = sum(ranges[:period]) / period
    result[period] = prev
    for i in range(period + 1, len(candles)):
        prev = wilder_step(prev, ranges[i - 1], period)
        result[i] = prev
    return result
