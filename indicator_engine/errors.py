"""Indicator engine error hierarchy.

All engine-related exceptions inherit from IndicatorError. The calculators
themselves never raise for short or flat candle data; these errors cover
programming mistakes (bad periods, misaligned series) and the candle
loading boundary.
"""

from __future__ import annotations


class IndicatorError(Exception):
    """Base exception for all indicator engine errors."""


class InvalidPeriodError(IndicatorError, ValueError):
    """Period or multiplier argument outside its valid range."""

    def __init__(self, name: str, value: float, minimum: float = 1) -> None:
        self.name = name
        self.value = value
        self.minimum = minimum
        super().__init__(f"{name} must be >= {minimum}, got {value}")


class SeriesLengthMismatchError(IndicatorError):
    """Series grouped into one result do not share the same length."""

    def __init__(self, lengths: dict[str, int]) -> None:
        self.lengths = lengths
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        super().__init__(f"Series must be equal length: {detail}")


class CandleDataError(IndicatorError):
    """Malformed candle records (missing fields, non-numeric prices)."""


class CandleSourceError(IndicatorError):
    """Candle producer unreachable or returned an HTTP error.

    status_code is None for connection failures and timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)
