from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # APP
    APP_NAME: str = "Data Magazine Analytics API"
    ENV: str = "development"
    DEBUG: bool = True

    # Ledger
    DATABASE_URL: str = "sqlite:///./sales.db"
    SALES_CSV_PATH: Optional[str] = None  # when set, the in-memory pandas ledger is used
    QUERY_TIMEOUT_MS: int = 5000

    # Analytics
    DEFAULT_PERIOD: str = "2024-25"
    ANALYTICS_CACHE_TTL_SECONDS: float = 300.0

    # CORS (comma separated string in .env)
    CORS_ORIGINS: Optional[str] = None

    # CACHE HTTP
    CACHE_MAX_AGE: int = 60
    CACHE_SWR: int = 300

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "structured"  # structured | simple
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: Optional[str] = None

    @field_validator("ANALYTICS_CACHE_TTL_SECONDS")
    @classmethod
    def _ttl_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("ANALYTICS_CACHE_TTL_SECONDS must be greater than zero.")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        v = self.CORS_ORIGINS
        if not v:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # unknown .env keys are ignored
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
