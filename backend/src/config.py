"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings for the SKU matching engine loaded from environment variables.

    All settings have sensible defaults for development.

    Environment Variables:
        DATABASE_URL: Catalog database connection string
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
        MATCH_MIN_CONFIDENCE: Default minimum confidence for returned matches
        MATCH_MAX_RESULTS: Default cap on results per food
        MATCH_BATCH_WORKERS: Parallel foods per batch call
        CATALOG_MAX_CONCURRENT_READS: Concurrent catalog reads per matcher
        CATALOG_READ_TIMEOUT_SECONDS: Timeout for a single catalog read
        PRICE_SANITY_CEILING: Prices at or above this are implausible
        CATEGORY_SCORING_ENABLED: Consult the category keyword table
    """

    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"

    # Matching defaults
    MATCH_MIN_CONFIDENCE: float = 0.6
    MATCH_MAX_RESULTS: int = 10
    MATCH_INCLUDE_OUT_OF_STOCK: bool = False

    # Worker pools
    MATCH_BATCH_WORKERS: int = 4
    CATALOG_MAX_CONCURRENT_READS: int = 4
    CATALOG_READ_TIMEOUT_SECONDS: float = 5.0

    # Scoring
    PRICE_SANITY_CEILING: float = 10_000.0
    CATEGORY_SCORING_ENABLED: bool = False

    # Platform adapters
    SAMS_CLUB_API_URL: str = "https://api.samsclub.com.cn/v1"
    HEMA_API_URL: str = "https://api.freshhema.com/v2"
    DINGDONG_API_URL: str = "https://api.ddxq.com/v1"
    CORRECTION_SINK: Optional[str] = None  # "sql" to persist corrections

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
