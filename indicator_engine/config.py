"""Pydantic Settings configuration models.

3-tier config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., INDICATORS_PARAMS__RSI_PERIOD=21)
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})


class IndicatorParams(BaseModel):
    """Periods for the oscillators and bands in the aggregate run."""

    rsi_period: int = Field(default=14, ge=2, le=100)
    macd_fast: int = Field(default=12, ge=2, le=100)
    macd_slow: int = Field(default=26, ge=3, le=200)
    macd_signal: int = Field(default=9, ge=2, le=100)
    bollinger_period: int = Field(default=20, ge=2, le=200)
    bollinger_std_dev: float = Field(default=2.0, ge=0.5, le=5.0)
    stochastic_period: int = Field(default=14, ge=2, le=100)
    stochastic_smooth_k: int = Field(default=3, ge=1, le=20)
    stochastic_smooth_d: int = Field(default=3, ge=1, le=20)
    atr_period: int = Field(default=14, ge=2, le=100)

    @model_validator(mode="after")
    def validate_macd_periods(self) -> IndicatorParams:
        if self.macd_slow <= self.macd_fast:
            raise ValueError(
                f"macd_slow ({self.macd_slow}) must be greater than "
                f"macd_fast ({self.macd_fast})"
            )
        return self


class SourceConfig(BaseModel):
    """Candle producer (dashboard candlestick REST endpoint)."""

    url: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0, le=120.0)


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Env var examples:
        INDICATORS_LOG_LEVEL=DEBUG
        INDICATORS_PARAMS__ATR_PERIOD=21
        INDICATORS_SOURCE__URL=http://localhost:5000/api/guilds/1/stocks/ABC/candlestick
    """

    model_config = SettingsConfigDict(
        env_prefix="INDICATORS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    params: IndicatorParams = IndicatorParams()
    source: SourceConfig = SourceConfig()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v
