"""Momentum oscillators: RSI and the Stochastic Oscillator."""

from __future__ import annotations

from collections.abc import Sequence

from indicator_engine.engine.moving_average import check_period, closes, rolling_mean
from indicator_engine.types import Candle, Series, StochasticSeries

# Floor for divisors that can reach zero (flat prices, no losses).
EPSILON = 0.0001


def price_changes(candles: Sequence[Candle]) -> tuple[list[float], list[float]]:
    """Per-step gains and losses. Element j is the move into candle j + 1."""
    prices = closes(candles)
    gains: list[float] = []
    losses: list[float] = []
    for i in range(1, len(prices)):
        change = prices[i] - prices[i - 1]
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)
    return gains, losses


def wilder_step(average: float, value: float, period: int) -> float:
    """One Wilder smoothing step: (avg * (period - 1) + value) / period."""
    return (average * (period - 1) + value) / period


def rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    """RSI for one position.

    avg_loss is floored at EPSILON, so flat prices give RS = 0 and
    RSI = 0 rather than the textbook 50.
    """
    rs = avg_gain / max(avg_loss, EPSILON)
    return 100 - 100 / (1 + rs)


def rsi(candles: Sequence[Candle], period: int = 14) -> Series:
    """Relative Strength Index with Wilder smoothing.

    Defined from candle index `period` on. rsi[period] uses the plain mean
    of the first `period` gains and losses; each later position advances
    the averages by one Wilder step.
    """
    check_period("period", period)
    result: Series = [None] * len(candles)
    if len(candles) <= period:
        return result

    gains, losses = price_changes(candles)
    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    for i in range(period, len(candles)):
        result[i] = rsi_from_averages(avg_gain, avg_loss)
        if i < len(gains):
            avg_gain = wilder_step(avg_gain, gains[i], period)
            avg_loss = wilder_step(avg_loss, losses[i], period)
    return result


def raw_stochastic(
    close: float,
    highest_high: float,
    lowest_low: float,
) -> float:
    """Unsmoothed %K. The range is floored at EPSILON."""
    return (close - lowest_low) / max(highest_high - lowest_low, EPSILON) * 100


def stochastic(
    candles: Sequence[Candle],
    period: int = 14,
    smooth_k: int = 3,
    smooth_d: int = 3,
) -> StochasticSeries:
    """Slow Stochastic Oscillator.

    Raw %K compares close to the highest high / lowest low of the last
    `period` candles. %K smooths raw %K over `smooth_k` samples and %D
    smooths %K over `smooth_d` samples; both stay None while any sample
    in their window is None.
    """
    check_period("period", period)
    check_period("smooth_k", smooth_k)
    check_period("smooth_d", smooth_d)

    raw_k: Series = []
    for i, candle in enumerate(candles):
        if i < period - 1:
            raw_k.append(None)
            continue
        window = candles[i - period + 1 : i + 1]
        highest = max(c.high for c in window)
        lowest = min(c.low for c in window)
        raw_k.append(raw_stochastic(candle.close, highest, lowest))

    k = rolling_mean(raw_k, smooth_k)
    d = rolling_mean(k, smooth_d)
    return StochasticSeries(k=k, d=d)
