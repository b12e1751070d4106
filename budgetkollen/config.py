"""Configuration management using Pydantic Settings"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETKOLLEN_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "budgetkollen"
    log_level: str = "INFO"

    # Files
    csv_filename: str = "financial-data.csv"
    session_file: str = "session_data.json"

    # Forecast
    salary_increase_rate: float = 0.025
    max_forecast_years: int = 50

    # Defaults for a fresh calculator
    default_interest_rates: List[float] = [3.5]
    default_amortization_rates: List[float] = [2.0]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
