"""Click CLI commands for the indicator engine."""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict
from typing import Any

import click

from indicator_engine.candles import fetch_candles, load_candles
from indicator_engine.config import AppConfig
from indicator_engine.engine import IndicatorCalculator, compute_all
from indicator_engine.errors import IndicatorError
from indicator_engine.types import Candle, IndicatorSnapshot
from indicator_engine.utils.logging import set_request_id, setup_logging

candle_file = click.argument(
    "candle_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False),
)
url_option = click.option(
    "--url",
    default=None,
    help="Candlestick endpoint to fetch from (default: INDICATORS_SOURCE__URL).",
)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Technical indicators for dashboard candle data."""
    cfg = AppConfig()
    setup_logging(level=cfg.log_level, log_format=cfg.log_format)
    set_request_id(uuid.uuid4().hex)
    ctx.obj = cfg


def _load(cfg: AppConfig, candle_file: str | None, url: str | None) -> list[Candle]:
    source_url = url or cfg.source.url
    try:
        if candle_file:
            return load_candles(candle_file)
        if source_url:
            return fetch_candles(source_url, timeout=cfg.source.timeout_seconds)
    except IndicatorError as e:
        raise click.ClickException(str(e)) from e
    raise click.ClickException("Provide a CANDLE_FILE or --url.")


def _tail(data: Any, n: int) -> Any:
    """Keep the last n positions of every series in a nested dict."""
    if isinstance(data, dict):
        return {key: _tail(value, n) for key, value in data.items()}
    return data[-n:]


@cli.command()
@candle_file
@url_option
@click.option(
    "--last",
    type=click.IntRange(min=1),
    default=None,
    help="Only print the last N positions of each series.",
)
@click.pass_obj
def compute(
    cfg: AppConfig,
    candle_file: str | None,
    url: str | None,
    last: int | None,
) -> None:
    """Compute every indicator series and print them as JSON."""
    candles = _load(cfg, candle_file, url)
    bundle = compute_all(candles, cfg.params)
    output = bundle.to_dict()
    if last is not None:
        output = _tail(output, last)
    click.echo(json.dumps(output, indent=2))


@cli.command()
@candle_file
@url_option
@click.pass_obj
def latest(cfg: AppConfig, candle_file: str | None, url: str | None) -> None:
    """Stream candles through the incremental calculator, print the last values."""
    candles = _load(cfg, candle_file, url)
    calc = IndicatorCalculator(cfg.params)
    snapshot = IndicatorSnapshot()
    for candle in candles:
        snapshot = calc.process_candle(candle)
    click.echo(json.dumps(asdict(snapshot), indent=2))


@cli.command()
@click.pass_obj
def config(cfg: AppConfig) -> None:
    """Show current configuration."""
    p = cfg.params

    click.echo("=== Indicator Engine Configuration ===\n")

    click.echo(f"Log Level:    {cfg.log_level}")
    click.echo(f"Log Format:   {cfg.log_format}")
    click.echo("")

    click.echo("[Indicators]")
    click.echo("  SMA:         5, 20, 60, 120")
    click.echo("  EMA:         12, 26")
    click.echo(f"  RSI:         {p.rsi_period}")
    click.echo(f"  MACD:        {p.macd_fast}/{p.macd_slow}/{p.macd_signal}")
    click.echo(f"  Bollinger:   {p.bollinger_period} x {p.bollinger_std_dev}")
    click.echo(
        f"  Stochastic:  {p.stochastic_period}"
        f"/{p.stochastic_smooth_k}/{p.stochastic_smooth_d}"
    )
    click.echo(f"  ATR:         {p.atr_period}")
    click.echo("")

    click.echo("[Source]")
    click.echo(f"  URL:         {cfg.source.url or '(none)'}")
    click.echo(f"  Timeout:     {cfg.source.timeout_seconds}s")
