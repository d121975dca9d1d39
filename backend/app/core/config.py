"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "devtul-results"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # API
    API_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./devtul.db"
    DATABASE_ECHO: bool = False

    # Results query
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500
    CATEGORY_FILTER_MODE: Literal["direct", "severity_range"] = Field(
        default="direct",
        description=(
            "How categoryFilters narrow results: 'direct' matches the stored "
            "category field, 'severity_range' expands categories into severities"
        ),
    )

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins as a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
