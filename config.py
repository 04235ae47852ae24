"""
Configuration management for CareTimeline
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "CareTimeline"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./care_timeline.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8081"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Timeline engine
    GRACE_PERIOD_MINUTES: int = 30
    MORNING_START: str = "05:00"
    AFTERNOON_START: str = "12:00"
    EVENING_START: str = "17:00"
    NIGHT_START: str = "21:00"
    TOMORROW_PREVIEW_LIMIT: int = 3
    COMPLETION_DEBOUNCE_SECONDS: float = 2.0
    RED_FLAG_MIN_DAYS: int = 3
    DEFAULT_LOOKBACK_DAYS: int = 7
    MARK_MISSED_AFTER_DAY_END: bool = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
