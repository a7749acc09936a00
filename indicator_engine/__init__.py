"""Technical indicators for the stock dashboard's chart overlays."""

from indicator_engine.engine import (
    IndicatorCalculator,
    atr,
    bollinger_bands,
    compute_all,
    ema,
    macd,
    rsi,
    sma,
    stochastic,
)
from indicator_engine.types import (
    BollingerSeries,
    Candle,
    IndicatorBundle,
    IndicatorSnapshot,
    MACDSeries,
    Series,
    StochasticSeries,
)

__all__ = [
    "BollingerSeries",
    "Candle",
    "IndicatorBundle",
    "IndicatorCalculator",
    "IndicatorSnapshot",
    "MACDSeries",
    "Series",
    "StochasticSeries",
    "atr",
    "bollinger_bands",
    "compute_all",
    "ema",
    "macd",
    "rsi",
    "sma",
    "stochastic",
]
