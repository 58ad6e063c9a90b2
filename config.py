"""
Configuration management for DoseMinder
"""

from datetime import datetime
from zoneinfo import ZoneInfo
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "DoseMinder"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./dose_minder.db"
    DATABASE_ECHO: bool = False

    # Localization and clock
    DEFAULT_LANGUAGE: str = "ko"  # "ko" or "en"
    TIMEZONE: str = "Asia/Seoul"  # Wall clock used for "now" and "today"
    WEEK_STARTS_ON: str = "monday"  # "monday" or "sunday"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class ScheduleConfig:
    """Fixed scheduling constants that are not environment driven"""

    # Default history window for adherence queries
    HISTORY_WINDOW_DAYS: int = 30

    SUPPORTED_LANGUAGES: list[str] = ["ko", "en"]


# Database table names
class TableNames:
    MEDICINES = "medicines"
    DOSE_RECORDS = "dose_records"


settings = get_settings()
schedule_config = ScheduleConfig()


def local_now() -> datetime:
    """Naive wall-clock time in the configured timezone"""
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).replace(tzinfo=None)
