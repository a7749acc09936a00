"""Aggregate runner: every calculator once, bundled for the chart overlays."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from indicator_engine.config import IndicatorParams
from indicator_engine.engine.momentum import rsi, stochastic
from indicator_engine.engine.moving_average import ema, sma
from indicator_engine.engine.trend import macd
from indicator_engine.engine.volatility import atr, bollinger_bands
from indicator_engine.types import Candle, IndicatorBundle

log = structlog.get_logger()


def compute_all(
    candles: Sequence[Candle],
    params: IndicatorParams | None = None,
) -> IndicatorBundle:
    """Compute the full indicator bundle for one candle window.

    No caching: each call recomputes from scratch, so it is safe to call on
    every new candle with a different window.
    """
    p = params or IndicatorParams()
    bundle = IndicatorBundle(
        sma5=sma(candles, 5),
        sma20=sma(candles, 20),
        sma60=sma(candles, 60),
        sma120=sma(candles, 120),
        ema12=ema(candles, 12),
        ema26=ema(candles, 26),
        rsi=rsi(candles, p.rsi_period),
        macd=macd(candles, p.macd_fast, p.macd_slow, p.macd_signal),
        bollinger=bollinger_bands(candles, p.bollinger_period, p.bollinger_std_dev),
        stochastic=stochastic(
            candles,
            p.stochastic_period,
            p.stochastic_smooth_k,
            p.stochastic_smooth_d,
        ),
        atr=atr(candles, p.atr_period),
    )
    log.debug("indicators_computed", candle_count=len(candles))
    return bundle
