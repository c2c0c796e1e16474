import os
from decimal import Decimal
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Banking System"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    # Rate limiting on mutating endpoints
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 30

    # CORS settings
    allowed_origins: List[str] = ["*"]
    allowed_methods: List[str] = ["GET", "POST", "OPTIONS"]
    allowed_headers: List[str] = ["*"]

    # Account defaults applied at creation time
    savings_minimum_balance: Decimal = Decimal("500.00")
    current_overdraft_limit: Decimal = Decimal("1000.00")

    # Presentation
    static_dir: str = "static"

    # Timezone
    timezone: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BANK_",
        case_sensitive=False,
        extra="ignore",
    )


class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    log_format: str = "console"
    rate_limit_per_minute: int = 100


class ProductionSettings(Settings):
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: List[str] = []  # Must be specified in production
    rate_limit_per_minute: int = 30


class TestingSettings(Settings):
    debug: bool = True
    log_level: str = "WARNING"  # Reduce noise in tests
    log_format: str = "console"
    rate_limit_enabled: bool = False


def get_settings_for_environment(env: str = "development") -> Settings:
    """Get settings for specific environment."""
    settings_map = {
        "development": DevelopmentSettings,
        "production": ProductionSettings,
        "testing": TestingSettings,
    }

    settings_class = settings_map.get(env.lower(), Settings)
    return settings_class()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings for the environment named by BANK_ENV."""
    return get_settings_for_environment(os.getenv("BANK_ENV", "default"))
