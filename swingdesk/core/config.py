"""Application settings with Pydantic validation and environment loading."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "SwingDesk API"
    app_version: str = "1.0.0"
    debug: bool = Field(
        default=False, description="Enable debug mode (disable in production)"
    )
    root_path: str = Field(default="", description="Root path for reverse proxy")
    environment: str = Field(
        default="production",
        description="Environment: development, staging, production",
    )

    # CORS
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins (no wildcards with credentials)",
    )

    # Valkey (Redis-compatible)
    cache_backend: Literal["memory", "valkey"] = Field(
        default="memory", description="Analysis store backend: memory or valkey"
    )
    valkey_url: str = Field(
        default="redis://valkey:6379/0", description="Valkey connection URL"
    )
    valkey_max_connections: int = Field(default=10, ge=1, le=100)

    # Analysis
    analysis_ttl_hours: float = Field(
        default=4.0, gt=0, description="Hours an on-demand analysis stays fresh"
    )
    chart_bars: int = Field(default=90, ge=1, le=365)
    history_period: str = Field(
        default="6mo", description="yfinance period used for price history"
    )
    default_exchange_suffix: str = Field(
        default=".NS", description="Suffix appended to bare symbols (NSE)"
    )
    analysis_strategy: Literal["margin", "swing"] = Field(
        default="margin", description="Signal strategy for on-demand analysis"
    )
    macd_signal_mode: Literal["approx", "ema"] = Field(
        default="approx",
        description="MACD signal line: approx (line * 0.8) or ema (9-period EMA)",
    )

    # Position sizing
    portfolio_value: float = Field(default=100_000.0, gt=0)
    position_exposure: float = Field(default=15_000.0, gt=0)
    position_max_risk: float = Field(default=750.0, ge=0)

    # Morning scan
    morning_watchlist: List[str] = Field(
        default_factory=lambda: [
            "RELIANCE",
            "TCS",
            "HDFCBANK",
            "INFY",
            "HINDUNILVR",
            "ITC",
            "KOTAKBANK",
            "LT",
            "SBIN",
            "BHARTIARTL",
            "ASIANPAINT",
            "ICICIBANK",
            "MARUTI",
            "AXISBANK",
        ]
    )
    morning_top_n: int = Field(default=10, ge=1, le=50)
    morning_concurrency: int = Field(default=5, ge=1, le=50)

    # External API timeouts
    external_api_timeout: int = Field(
        default=30, ge=5, le=120, description="External API timeout in seconds"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("morning_watchlist", mode="before")
    @classmethod
    def parse_watchlist(cls, v):
        if isinstance(v, str):
            return [s.strip().upper() for s in v.split(",") if s.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Cached settings factory."""
    return Settings()


settings = get_settings()
