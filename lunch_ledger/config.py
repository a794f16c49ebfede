"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="LUNCH_", extra="ignore"
    )

    # Service
    service_name: str = "lunch-ledger"
    log_level: str = "INFO"

    # Money
    default_sales_tax_rate: Decimal = Decimal("0.0925")  # 9.25%

    # Replies
    help_path: Path = Path(__file__).resolve().parent / "help.md"
    history_limit: int = 10  # Money events shown by "show history"
    person_meal_history_limit: int = 3  # Meals shown by "show ordered?"


settings = Settings()
