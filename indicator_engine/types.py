"""Indicator engine domain types.

Frozen dataclasses for the candle input and every result group.
Series are plain lists aligned with the input candles; None marks a
position the indicator cannot compute yet (warm-up), so an undefined
value is never confused with a computed zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from indicator_engine.errors import SeriesLengthMismatchError

Series = list[float | None]


def check_aligned(**series: Series) -> None:
    """Raise SeriesLengthMismatchError unless all series share one length."""
    lengths = {name: len(values) for name, values in series.items()}
    if len(set(lengths.values())) > 1:
        raise SeriesLengthMismatchError(lengths)


# --- Input ---


@dataclass(frozen=True)
class Candle:
    """OHLCV candle. Callers guarantee low <= open, close <= high."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


# --- Result groups (frozen) ---


@dataclass(frozen=True)
class MACDSeries:
    """MACD line, signal line and histogram."""

    macd: Series
    signal: Series
    histogram: Series

    def __post_init__(self) -> None:
        check_aligned(macd=self.macd, signal=self.signal, histogram=self.histogram)


@dataclass(frozen=True)
class BollingerSeries:
    """Upper, middle and lower Bollinger bands."""

    upper: Series
    middle: Series
    lower: Series

    def __post_init__(self) -> None:
        check_aligned(upper=self.upper, middle=self.middle, lower=self.lower)


@dataclass(frozen=True)
class StochasticSeries:
    """Smoothed %K and %D lines."""

    k: Series
    d: Series

    def __post_init__(self) -> None:
        check_aligned(k=self.k, d=self.d)


@dataclass(frozen=True)
class IndicatorBundle:
    """Every chart overlay series for one candle window.

    Built fresh per compute_all() call. All series share the length of the
    candle sequence they were computed from.
    """

    sma5: Series
    sma20: Series
    sma60: Series
    sma120: Series
    ema12: Series
    ema26: Series
    rsi: Series
    macd: MACDSeries
    bollinger: BollingerSeries
    stochastic: StochasticSeries
    atr: Series

    def __post_init__(self) -> None:
        check_aligned(
            sma5=self.sma5,
            sma20=self.sma20,
            sma60=self.sma60,
            sma120=self.sma120,
            ema12=self.ema12,
            ema26=self.ema26,
            rsi=self.rsi,
            macd=self.macd.macd,
            bollinger=self.bollinger.middle,
            stochastic=self.stochastic.k,
            atr=self.atr,
        )

    @property
    def length(self) -> int:
        return len(self.sma5)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation. Undefined positions stay None."""
        return {
            "sma5": list(self.sma5),
            "sma20": list(self.sma20),
            "sma60": list(self.sma60),
            "sma120": list(self.sma120),
            "ema12": list(self.ema12),
            "ema26": list(self.ema26),
            "rsi": list(self.rsi),
            "macd": {
                "macd": list(self.macd.macd),
                "signal": list(self.macd.signal),
                "histogram": list(self.macd.histogram),
            },
            "bollinger": {
                "upper": list(self.bollinger.upper),
                "middle": list(self.bollinger.middle),
                "lower": list(self.bollinger.lower),
            },
            "stochastic": {
                "k": list(self.stochastic.k),
                "d": list(self.stochastic.d),
            },
            "atr": list(self.atr),
        }

    def snapshot(self, index: int = -1) -> IndicatorSnapshot:
        """Values at one position, flattened into an IndicatorSnapshot."""
        if self.length == 0:
            return IndicatorSnapshot()
        i = index if index >= 0 else self.length + index
        if not 0 <= i < self.length:
            raise IndexError(
                f"snapshot index {index} out of range for {self.length} bars"
            )
        return IndicatorSnapshot(
            sma5=self.sma5[i],
            sma20=self.sma20[i],
            sma60=self.sma60[i],
            sma120=self.sma120[i],
            ema12=self.ema12[i],
            ema26=self.ema26[i],
            rsi=self.rsi[i],
            macd=self.macd.macd[i],
            macd_signal=self.macd.signal[i],
            macd_histogram=self.macd.histogram[i],
            bollinger_upper=self.bollinger.upper[i],
            bollinger_middle=self.bollinger.middle[i],
            bollinger_lower=self.bollinger.lower[i],
            stochastic_k=self.stochastic.k[i],
            stochastic_d=self.stochastic.d[i],
            atr=self.atr[i],
            bar_count=i + 1,
        )


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Latest value of every bundle series.

    All fields are None until the matching indicator is warm.
    """

    sma5: float | None = None
    sma20: float | None = None
    sma60: float | None = None
    sma120: float | None = None
    ema12: float | None = None
    ema26: float | None = None
    rsi: float | None = None
    macd: float | None = None
    macd_signal: float | None = None
    macd_histogram: float | None = None
    bollinger_upper: float | None = None
    bollinger_middle: float | None = None
    bollinger_lower: float | None = None
    stochastic_k: float | None = None
    stochastic_d: float | None = None
    atr: float | None = None
    bar_count: int = 0
