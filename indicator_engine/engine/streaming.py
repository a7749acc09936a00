"""Incremental indicator calculation, one candle at a time.

Each class keeps only the trailing state its recurrence needs and exposes
`update()`, `value` (None until warm), `is_warm` and `count`.
IndicatorCalculator composes them into the same set of series that
compute_all() returns in batch.

Sums are taken over the buffered window rather than kept as a running
total, so every value is bit-identical to the batch result for the same
prefix of candles.
"""

from __future__ import annotations

from collections import deque

from indicator_engine.config import IndicatorParams
from indicator_engine.engine.momentum import (
    raw_stochastic,
    rsi_from_averages,
    wilder_step,
)
from indicator_engine.engine.moving_average import check_period
from indicator_engine.engine.volatility import population_std, true_range_of
from indicator_engine.errors import InvalidPeriodError
from indicator_engine.types import Candle, IndicatorSnapshot


class SMA:
    """Simple Moving Average over a ring buffer. O(period) per read."""

    __slots__ = ("_buf", "_period")

    def __init__(self, period: int) -> None:
        check_period("period", period)
        self._period = period
        self._buf: deque[float] = deque(maxlen=period)

    def update(self, value: float) -> None:
        """Add a value. Evicts oldest if at capacity."""
        self._buf.append(value)

    @property
    def value(self) -> float | None:
        """Current SMA, or None if not warm."""
        if len(self._buf) < self._period:
            return None
        return sum(self._buf) / self._period

    @property
    def window(self) -> list[float]:
        return list(self._buf)

    @property
    def is_warm(self) -> bool:
        return len(self._buf) >= self._period

    @property
    def count(self) -> int:
        """Number of values currently in the buffer."""
        return len(self._buf)


class EMA:
    """Exponential Moving Average seeded with the SMA of the first values."""

    __slots__ = ("_count", "_multiplier", "_period", "_seed", "_value")

    def __init__(self, period: int) -> None:
        check_period("period", period)
        self._period = period
        self._multiplier = 2 / (period + 1)
        self._seed: list[float] = []
        self._value: float | None = None
        self._count = 0

    def update(self, value: float) -> None:
        self._count += 1
        if self._value is None:
            self._seed.append(value)
            if len(self._seed) == self._period:
                self._value = sum(self._seed) / self._period
                self._seed.clear()
            return
        self._value = (value - self._value) * self._multiplier + self._value

    @property
    def value(self) -> float | None:
        return self._value

    @property
    def is_warm(self) -> bool:
        return self._value is not None

    @property
    def count(self) -> int:
        """Number of values seen."""
        return self._count


class RSI:
    """Relative Strength Index with Wilder-smoothed averages."""

    __slots__ = (
        "_avg_gain",
        "_avg_loss",
        "_count",
        "_gains",
        "_losses",
        "_period",
        "_prev_close",
    )

    def __init__(self, period: int = 14) -> None:
        check_period("period", period)
        self._period = period
        self._prev_close: float | None = None
        self._gains: list[float] = []
        self._losses: list[float] = []
        self._avg_gain: float | None = None
        self._avg_loss: float | None = None
        self._count = 0

    def update(self, close: float) -> None:
        self._count += 1
        prev, self._prev_close = self._prev_close, close
        if prev is None:
            return

        change = close - prev
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0

        if self._avg_gain is None or self._avg_loss is None:
            self._gains.append(gain)
            self._losses.append(loss)
            if len(self._gains) == self._period:
                self._avg_gain = sum(self._gains) / self._period
                self._avg_loss = sum(self._losses) / self._period
            return

        self._avg_gain = wilder_step(self._avg_gain, gain, self._period)
        self._avg_loss = wilder_step(self._avg_loss, loss, self._period)

    @property
    def value(self) -> float | None:
        if self._avg_gain is None or self._avg_loss is None:
            return None
        return rsi_from_averages(self._avg_gain, self._avg_loss)

    @property
    def is_warm(self) -> bool:
        return self._avg_gain is not None

    @property
    def count(self) -> int:
        return self._count


class Stochastic:
    """Slow Stochastic Oscillator (%K smoothed, %D of %K)."""

    __slots__ = ("_d", "_highs", "_k", "_k_values", "_lows", "_period", "_raw")

    def __init__(self, period: int = 14, smooth_k: int = 3, smooth_d: int = 3) -> None:
        check_period("period", period)
        check_period("smooth_k", smooth_k)
        check_period("smooth_d", smooth_d)
        self._highs: deque[float] = deque(maxlen=period)
        self._lows: deque[float] = deque(maxlen=period)
        self._raw = SMA(smooth_k)
        self._k_values = SMA(smooth_d)
        self._period = period
        self._k: float | None = None
        self._d: float | None = None

    def update(self, candle: Candle) -> None:
        self._highs.append(candle.high)
        self._lows.append(candle.low)
        if len(self._highs) < self._period:
            return

        raw = raw_stochastic(candle.close, max(self._highs), min(self._lows))
        self._raw.update(raw)
        k = self._raw.value
        if k is None:
            return
        self._k = k
        self._k_values.update(k)
        self._d = self._k_values.value

    @property
    def value(self) -> tuple[float | None, float | None]:
        """(%K, %D)."""
        return self._k, self._d

    @property
    def is_warm(self) -> bool:
        return self._d is not None


class BollingerBands:
    """SMA middle band with population-deviation bands."""

    __slots__ = ("_sma", "_std_dev")

    def __init__(self, period: int = 20, std_dev: float = 2.0) -> None:
        if std_dev < 0:
            raise InvalidPeriodError("std_dev", std_dev, minimum=0)
        self._sma = SMA(period)
        self._std_dev = std_dev

    def update(self, close: float) -> None:
        self._sma.update(close)

    @property
    def value(self) -> tuple[float | None, float | None, float | None]:
        """(upper, middle, lower)."""
        mid = self._sma.value
        if mid is None:
            return None, None, None
        sigma = population_std(self._sma.window, mid)
        return mid + self._std_dev * sigma, mid, mid - self._std_dev * sigma

    @property
    def is_warm(self) -> bool:
        return self._sma.is_warm


class ATR:
    """Average True Range with Wilder smoothing."""

    __slots__ = ("_count", "_period", "_prev_close", "_ranges", "_value")

    def __init__(self, period: int = 14) -> None:
        check_period("period", period)
        self._period = period
        self._prev_close: float | None = None
        self._ranges: list[float] = []
        self._value: float | None = None
        self._count = 0

    def update(self, candle: Candle) -> None:
        self._count += 1
        prev, self._prev_close = self._prev_close, candle.close
        if prev is None:
            return

        tr = true_range_of(candle, prev)
        if self._value is None:
            self._ranges.append(tr)
            if len(self._ranges) == self._period:
                self._value = sum(self._ranges) / self._period
                self._ranges.clear()
            return
        self._value = wilder_step(self._value, tr, self._period)

    @property
    def value(self) -> float | None:
        return self._value

    @property
    def is_warm(self) -> bool:
        return self._value is not None

    @property
    def count(self) -> int:
        return self._count


class MACD:
    """Fast EMA minus slow EMA, with a signal EMA over the difference."""

    __slots__ = ("_fast", "_macd", "_signal", "_slow")

    def __init__(self, fast: int = 12, slow: int = 26, signal: int = 9) -> None:
        self._fast = EMA(fast)
        self._slow = EMA(slow)
        self._signal = EMA(signal)
        self._macd: float | None = None

    def update(self, close: float) -> None:
        self._fast.update(close)
        self._slow.update(close)
        fast, slow = self._fast.value, self._slow.value
        if fast is None or slow is None:
            return
        self._macd = fast - slow
        self._signal.update(self._macd)

    @property
    def value(self) -> tuple[float | None, float | None, float | None]:
        """(macd, signal, histogram)."""
        signal = self._signal.value
        if self._macd is None or signal is None:
            return self._macd, signal, None
        return self._macd, signal, self._macd - signal

    @property
    def is_warm(self) -> bool:
        return self._signal.is_warm


class IndicatorCalculator:
    """Computes the bundle's indicators from a candle stream.

    For every prefix of a candle sequence, the snapshot returned by
    process_candle() equals compute_all(candles).snapshot(i).
    Not thread-safe: use one instance per candle stream.
    """

    def __init__(self, params: IndicatorParams | None = None) -> None:
        p = params or IndicatorParams()
        self._sma5 = SMA(5)
        self._sma20 = SMA(20)
        self._sma60 = SMA(60)
        self._sma120 = SMA(120)
        self._ema12 = EMA(12)
        self._ema26 = EMA(26)
        self._rsi = RSI(p.rsi_period)
        self._macd = MACD(p.macd_fast, p.macd_slow, p.macd_signal)
        self._bollinger = BollingerBands(p.bollinger_period, p.bollinger_std_dev)
        self._stochastic = Stochastic(
            p.stochastic_period, p.stochastic_smooth_k, p.stochastic_smooth_d
        )
        self._atr = ATR(p.atr_period)
        self._bar_count = 0

    def process_candle(self, candle: Candle) -> IndicatorSnapshot:
        """Add candle to every indicator and return the latest values."""
        close = candle.close
        for ma in (self._sma5, self._sma20, self._sma60, self._sma120):
            ma.update(close)
        self._ema12.update(close)
        self._ema26.update(close)
        self._rsi.update(close)
        self._macd.update(close)
        self._bollinger.update(close)
        self._stochastic.update(candle)
        self._atr.update(candle)
        self._bar_count += 1

        macd_line, signal, histogram = self._macd.value
        upper, middle, lower = self._bollinger.value
        k, d = self._stochastic.value
        return IndicatorSnapshot(
            sma5=self._sma5.value,
            sma20=self._sma20.value,
            sma60=self._sma60.value,
            sma120=self._sma120.value,
            ema12=self._ema12.value,
            ema26=self._ema26.value,
            rsi=self._rsi.value,
            macd=macd_line,
            macd_signal=signal,
            macd_histogram=histogram,
            bollinger_upper=upper,
            bollinger_middle=middle,
            bollinger_lower=lower,
            stochastic_k=k,
            stochastic_d=d,
            atr=self._atr.value,
            bar_count=self._bar_count,
        )

    @property
    def bar_count(self) -> int:
        """Number of candles processed."""
        return self._bar_count

    @property
    def is_warm(self) -> bool:
        """True once every indicator has a value."""
        return all(
            ind.is_warm
            for ind in (
                self._sma120,
                self._ema26,
                self._rsi,
                self._macd,
                self._bollinger,
                self._stochastic,
                self._atr,
            )
        )
