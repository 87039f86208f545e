from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "Transaction Ledger"
    app_version: str = "1.0.0"
    debug: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    # Feature flags
    enable_detailed_logging: bool = False  # log every applied record
    fail_on_rejected_rows: bool = False  # exit 2 when the feed had unreadable rows


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Environment-specific configurations
class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    enable_detailed_logging: bool = True
    fail_on_rejected_rows: bool = False


class ProductionSettings(Settings):
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    enable_detailed_logging: bool = False
    fail_on_rejected_rows: bool = True


class TestingSettings(Settings):
    debug: bool = True
    log_level: str = "WARNING"
    enable_detailed_logging: bool = False
    fail_on_rejected_rows: bool = False  # feeds with bad rows are exercised on purpose


ENVIRONMENTS = {
    "development": DevelopmentSettings,
    "production": ProductionSettings,
    "testing": TestingSettings,
}


def get_settings_for_environment(env: str = "development") -> Settings:
    """Get settings for specific environment."""
    settings_class = ENVIRONMENTS.get(env.lower(), Settings)
    return settings_class()
