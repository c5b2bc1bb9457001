"""
Honorary Allow-List - Configuration
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from allowlist import __version__


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Honorary Allow-List"
    VERSION: str = __version__
    ENV: str = "development"
    LOG_LEVEL: str = "WARNING"

    # Tree construction
    ALLOWLIST_SORT_LEAVES: bool = True
    ALLOWLIST_REQUIRE_ENTRIES: bool = False

    # Metrics
    METRICS_ENABLED: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
