"""Tests for Bollinger Bands, True Range and ATR."""

from __future__ import annotations

import math

import pytest
from hypothesis import given, settings

from indicator_engine.engine.volatility import atr, bollinger_bands, true_range
from indicator_engine.errors import InvalidPeriodError
from indicator_engine.types import Candle
from tests.factories import (
    candle_lists,
    make_candle,
    make_candles,
    rising_candles,
)


def _reference_wilder_atr(candles: list[Candle], period: int) -> list[float | None]:
    """Textbook Wilder ATR, written independently of the engine."""
    result: list[float | None] = [None] * len(candles)
    if len(candles) <= period:
        return result
    tr = {
        t: max(
            candles[t].high - candles[t].low,
            abs(candles[t].high - candles[t - 1].close),
            abs(candles[t].low - candles[t - 1].close),
        )
        for t in range(1, len(candles))
    }
    value = sum(tr[t] for t in range(1, period + 1)) / period
    result[period] = value
    for t in range(period + 1, len(candles)):
        value = (value * (period - 1) + tr[t]) / period
        result[t] = value
    return result


class TestBollingerBands:
    """Band values and ordering."""

    def test_known_values(self) -> None:
        candles = make_candles([1.0, 2.0, 3.0, 4.0, 5.0])
        result = bollinger_bands(candles, period=5, std_dev=2.0)
        # mean 3, population variance (4 + 1 + 0 + 1 + 4) / 5 = 2
        assert result.middle[4] == pytest.approx(3.0)
        assert result.upper[4] == pytest.approx(3.0 + 2 * math.sqrt(2))
        assert result.lower[4] == pytest.approx(3.0 - 2 * math.sqrt(2))

    def test_undefined_before_period(self) -> None:
        result = bollinger_bands(rising_candles(25))
        for series in (result.upper, result.middle, result.lower):
            assert series[:19] == [None] * 19
            assert all(v is not None for v in series[19:])

    def test_constant_close_collapses_bands(self) -> None:
        candles = make_candles([50.0] * 25)
        result = bollinger_bands(candles)
        assert result.upper[19:] == result.middle[19:] == result.lower[19:]

    def test_zero_multiplier(self) -> None:
        result = bollinger_bands(rising_candles(25), std_dev=0.0)
        assert result.upper == result.middle == result.lower

    def test_negative_multiplier_rejected(self) -> None:
        with pytest.raises(InvalidPeriodError):
            bollinger_bands(rising_candles(25), std_dev=-1.0)

    def test_empty_input(self) -> None:
        result = bollinger_bands([])
        assert result.upper == result.middle == result.lower == []

    @given(candles=candle_lists())
    @settings(max_examples=200)
    def test_ordering(self, candles: list[Candle]) -> None:
        result = bollinger_bands(candles)
        assert len(result.middle) == len(candles)
        for up, mid, low in zip(result.upper, result.middle, result.lower, strict=True):
            if mid is None:
                assert up is None and low is None
            else:
                assert up is not None and low is not None
                assert low <= mid <= up


class TestTrueRange:
    """True Range per candle."""

    def test_first_undefined(self) -> None:
        assert true_range([make_candle()]) == [None]

    def test_gap_up_uses_previous_close(self) -> None:
        candles = [
            make_candle(open=10.0, high=10.5, low=9.5, close=10.0),
            make_candle(open=13.0, high=15.0, low=13.0, close=14.0),
        ]
        # max(15 - 13, |15 - 10|, |13 - 10|)
        assert true_range(candles) == [None, 5.0]

    def test_gap_down_uses_previous_close(self) -> None:
        candles = [
            make_candle(open=20.0, high=20.5, low=19.5, close=20.0),
            make_candle(open=16.0, high=17.0, low=15.0, close=16.0),
        ]
        # max(17 - 15, |17 - 20|, |15 - 20|)
        assert true_range(candles) == [None, 5.0]

    def test_inside_bar_uses_range(self) -> None:
        candles = [
            make_candle(open=10.0, high=11.0, low=9.0, close=10.0),
            make_candle(open=10.0, high=13.0, low=8.0, close=10.0),
        ]
        assert true_range(candles) == [None, 5.0]


class TestATR:
    """ATR warm-up, values and the indexing of its recurrence."""

    def test_rising_scenario_constant(self, rising: list[Candle]) -> None:
        result = atr(rising, 14)
        assert result[:14] == [None] * 14
        assert result[14:] == [2.0] * 16

    def test_too_short_all_undefined(self) -> None:
        assert atr(rising_candles(14), 14) == [None] * 14
        assert atr([], 14) == []

    def test_seed_is_mean_of_first_true_ranges(self, random_walk: list[Candle]) -> None:
        ranges = true_range(random_walk)[1:15]
        expected = sum(r for r in ranges if r is not None) / 14
        assert atr(random_walk, 14)[14] == pytest.approx(expected)

    def test_matches_reference_wilder_atr(self, random_walk: list[Candle]) -> None:
        """No one-step offset against the textbook definition."""
        result = atr(random_walk, 14)
        reference = _reference_wilder_atr(random_walk, 14)
        assert len(result) == len(reference)
        for got, want in zip(result, reference, strict=True):
            if want is None:
                assert got is None
            else:
                assert got == pytest.approx(want)

    def test_spike_enters_at_its_own_index(self) -> None:
        candles = rising_candles(25)
        spike = candles[20]
        candles[20] = make_candle(
            timestamp=spike.timestamp,
            open=spike.open,
            high=spike.high + 20.0,
            low=spike.low,
            close=spike.close,
        )
        result = atr(candles, 5)
        assert result[19] == pytest.approx(2.0)
        # TR of candle 20 is 22: (2 * 4 + 22) / 5
        assert result[20] == pytest.approx(6.0)

    def test_invalid_period(self) -> None:
        with pytest.raises(InvalidPeriodError):
            atr(rising_candles(5), 0)

    @given(candles=candle_lists())
    @settings(max_examples=200)
    def test_non_negative(self, candles: list[Candle]) -> None:
        result = atr(candles)
        assert len(result) == len(candles)
        for value in result:
            if value is not None:
                assert value >= 0.0
