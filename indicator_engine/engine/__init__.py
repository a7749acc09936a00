"""Engine layer: batch indicator calculators and their streaming mirror."""

from indicator_engine.engine.aggregate import compute_all
from indicator_engine.engine.momentum import EPSILON, rsi, stochastic
from indicator_engine.engine.moving_average import ema, ema_of_series, sma
from indicator_engine.engine.streaming import IndicatorCalculator
from indicator_engine.engine.trend import macd
from indicator_engine.engine.volatility import atr, bollinger_bands, true_range

__all__ = [
    "EPSILON",
    "IndicatorCalculator",
    "atr",
    "bollinger_bands",
    "compute_all",
    "ema",
    "ema_of_series",
    "macd",
    "rsi",
    "sma",
    "stochastic",
    "true_range",
]
