"""Simple and exponential moving averages over candle closes.

Batch functions: each call walks the whole candle sequence and returns a
series aligned with it. Warm-up positions are None.
"""

from __future__ import annotations

from collections.abc import Sequence

from indicator_engine.errors import InvalidPeriodError
from indicator_engine.types import Candle, Series


def check_period(name: str, value: int) -> None:
    """Reject periods below 1. Shared by every calculator."""
    if value < 1:
        raise InvalidPeriodError(name, value)


def closes(candles: Sequence[Candle]) -> list[float]:
    return [c.close for c in candles]


def rolling_mean(values: Sequence[float | None], period: int) -> Series:
    """Trailing arithmetic mean over `period` samples.

    A position is None while any sample in its window is None, so an
    undefined input never enters the mean as zero.
    """
    check_period("period", period)
    result: Series = []
    for i in range(len(values)):
        if i < period - 1:
            result.append(None)
            continue
        window = [v for v in values[i - period + 1 : i + 1] if v is not None]
        if len(window) < period:
            result.append(None)
            continue
        result.append(sum(window) / period)
    return result


def sma(candles: Sequence[Candle], period: int) -> Series:
    """Simple moving average of close. None for i < period - 1."""
    return rolling_mean(closes(candles), period)


def ema_of_series(values: Sequence[float | None], period: int) -> Series:
    """Exponential moving average over a series that may start undefined.

    The seed is the mean of the first `period` values counted from the
    first defined position; the recurrence
    ``ema[i] = (x[i] - ema[i-1]) * alpha + ema[i-1]`` runs after it with
    ``alpha = 2 / (period + 1)``. Leading None values stay None. A None
    after the seed window ends the defined region.
    """
    check_period("period", period)
    result: Series = [None] * len(values)
    start = next((i for i, v in enumerate(values) if v is not None), None)
    if start is None:
        return result

    seed_end = start + period - 1
    if seed_end >= len(values):
        return result
    seed_window = [v for v in values[start : seed_end + 1] if v is not None]
    if len(seed_window) < period:
        return result

    multiplier = 2 / (period + 1)
    prev = sum(seed_window) / period
    result[seed_end] = prev
    for i in range(seed_end + 1, len(values)):
        value = values[i]
        if value is None:
            break
        prev = (value - prev) * multiplier + prev
        result[i] = prev
    return result


def ema(candles: Sequence[Candle], period: int) -> Series:
    """Exponential moving average of close, seeded with SMA at period - 1.

    The whole series is None when there are fewer than `period` candles.
    """
    return ema_of_series(closes(candles), period)
