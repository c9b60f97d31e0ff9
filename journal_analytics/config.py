"""Application configuration loaded from environment variables and .env file."""

from __future__ import annotations

import logging
import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Journal analytics configuration.

    Values are loaded from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Metric options
    annualization_factor: float | None = None  # e.g. 252; None keeps the per-trade Sharpe
    average_risk_per_trade: float = 1.0  # Edge ratio denominator, in P&L units

    # Aggregation
    max_workers: int = 1

    # Logging
    log_level: str = "INFO"

    @field_validator("annualization_factor")
    @classmethod
    def validate_annualization_factor(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("annualization_factor must be positive when set")
        return v

    @field_validator("average_risk_per_trade")
    @classmethod
    def validate_average_risk_per_trade(cls, v: float) -> float:
        if v < 0:
            raise ValueError("average_risk_per_trade must not be negative")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got '{v}'")
        return v


def setup_logging(level: str = "INFO") -> None:
    """Configure logging with console and file handlers.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))

    # Clear existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # File handler: data/journal_analytics.log, skipped if data/ is missing
    try:
        file_handler = logging.FileHandler("data/journal_analytics.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)
    except OSError:
        pass


# Module-level singleton
settings = Settings()
