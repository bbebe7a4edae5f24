"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix RENTALCALC_)."""

    # App settings
    app_name: str = "Rental Investment Calculator"
    log_level: str = "INFO"
    app_env: str = "development"

    # Forecast defaults (percent values, e.g. 3.0 = 3%)
    default_appreciation_percent: float = 3.0
    sale_cost_percent: float = 6.0

    # 1% rule
    one_percent_threshold: float = 1.0

    # Comparable search (0.008 degrees is roughly half a mile)
    comparable_search_degrees: float = 0.008
    comparable_sqft_tolerance: float = 0.20
    max_comparables: int = 10

    # IRR solver
    irr_max_iterations: int = 100
    irr_tolerance: float = 1e-4

    model_config = SettingsConfigDict(
        env_prefix="RENTALCALC_",
        env_file=get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
