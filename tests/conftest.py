"""Shared test fixtures for the indicator engine."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from indicator_engine.types import Candle
from indicator_engine.utils.logging import set_request_id
from tests.factories import flat_candles, random_walk_candles, rising_candles


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo setup_logging() so handlers never outlive a CliRunner stream."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    set_request_id("")


@pytest.fixture
def rising() -> list[Candle]:
    """30 candles closing 100..129, high = close + 1, low = close - 1."""
    return rising_candles(30)


@pytest.fixture
def flat() -> list[Candle]:
    return flat_candles(30)


@pytest.fixture
def random_walk() -> list[Candle]:
    return random_walk_candles(150)
