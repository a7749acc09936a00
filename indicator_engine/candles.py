"""Candle loading at the engine boundary.

The dashboard's candlestick endpoint returns a JSON array of records with
prices as decimal strings and a nullable volume. Records are validated
with pydantic, converted to float Candles and sorted ascending by
timestamp. The engine itself never sorts or validates.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from indicator_engine.errors import CandleDataError, CandleSourceError
from indicator_engine.types import Candle

log = structlog.get_logger()


class CandleRecord(BaseModel):
    """One candlestick row as served by the dashboard API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    timestamp: datetime
    open: float = Field(ge=0, allow_inf_nan=False)
    high: float = Field(ge=0, allow_inf_nan=False)
    low: float = Field(ge=0, allow_inf_nan=False)
    close: float = Field(ge=0, allow_inf_nan=False)
    volume: float | None = Field(default=0.0, ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def validate_range(self) -> CandleRecord:
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) must be >= low ({self.low})")
        for name in ("open", "close"):
            price = getattr(self, name)
            if not self.low <= price <= self.high:
                raise ValueError(
                    f"{name} ({price}) must lie within low..high "
                    f"({self.low}..{self.high})"
                )
        return self

    def to_candle(self) -> Candle:
        return Candle(
            timestamp=self.timestamp,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume or 0.0,
        )


def parse_candles(records: Iterable[Mapping[str, Any]]) -> list[Candle]:
    """Validate raw records and return Candles sorted by timestamp.

    Raises:
        CandleDataError: a record is missing a field or has bad values.
    """
    candles: list[Candle] = []
    for i, record in enumerate(records):
        try:
            candles.append(CandleRecord.model_validate(record).to_candle())
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) or "record"
                for err in e.errors()
            )
            raise CandleDataError(
                f"Invalid candle record at index {i}: {fields}"
            ) from e

    candles.sort(key=lambda c: c.timestamp)
    log.info("candles_loaded", candle_count=len(candles))
    return candles


def _as_records(payload: Any) -> list[Mapping[str, Any]]:
    if not isinstance(payload, list):
        raise CandleDataError(
            f"Expected a JSON array of candles, got {type(payload).__name__}"
        )
    for i, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise CandleDataError(f"Candle record at index {i} is not an object")
    return payload


def load_candles(path: str | Path) -> list[Candle]:
    """Read a JSON array of candle records from a file."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise CandleSourceError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CandleDataError(f"{path} is not valid JSON: {e}") from e
    return parse_candles(_as_records(payload))


def fetch_candles(
    url: str,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> list[Candle]:
    """GET a JSON array of candle records from the dashboard API.

    Raises:
        CandleSourceError: connection failure, timeout or HTTP error status.
        CandleDataError: the response body is not a valid candle array.
    """
    http = client or httpx.Client(timeout=timeout)
    try:
        resp = http.get(url)
        resp.raise_for_status()
        payload = resp.json()
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        log.warning("candle_fetch_failed", url=url, status_code=status_code)
        raise CandleSourceError(
            f"Candle source returned HTTP {status_code}", status_code=status_code
        ) from e
    except httpx.TransportError as e:
        log.warning("candle_fetch_failed", url=url, error=str(e))
        raise CandleSourceError(f"Could not reach candle source: {e}") from e
    except json.JSONDecodeError as e:
        raise CandleDataError("Candle source returned invalid JSON") from e
    finally:
        if client is None:
            http.close()

    return parse_candles(_as_records(payload))
