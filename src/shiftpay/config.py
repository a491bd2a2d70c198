"""Configuration management for shiftpay."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str

    # Calculation defaults
    default_tax_year: str
    default_maximum_shift_hours: Decimal
    medicare_levy_rate: Decimal
    medicare_low_threshold: Decimal
    medicare_high_threshold: Decimal

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            default_tax_year=os.getenv("DEFAULT_TAX_YEAR", "2024-25"),
            default_maximum_shift_hours=Decimal(
                os.getenv("DEFAULT_MAXIMUM_SHIFT_HOURS", "11")
            ),
            medicare_levy_rate=Decimal(os.getenv("MEDICARE_LEVY_RATE", "0.02")),
            medicare_low_threshold=Decimal(
                os.getenv("MEDICARE_LOW_THRESHOLD", "26000")
            ),
            medicare_high_threshold=Decimal(
                os.getenv("MEDICARE_HIGH_THRESHOLD", "32500")
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
