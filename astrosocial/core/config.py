"""
Application configuration settings with validation.
Loads from environment variables (and .env) with type checking.
"""

from typing import Annotated, List
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    # Application Metadata
    PROJECT_TITLE: str = "AstroSocial User API"
    PROJECT_DESCRIPTION: str = "User profiles, search and follow graph for the AstroSocial community"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"  # or 'testing', 'production'
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./astrosocial.db"
    SQL_ECHO: bool = False

    # Authentication
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Avatar storage
    MEDIA_ROOT: str = "./media"
    MEDIA_URL: str = "/media"
    MAX_AVATAR_SIZE: int = 5 * 1024 * 1024  # 5MB

    # Localization
    LANGUAGES: Annotated[List[str], NoDecode] = ["en", "fr"]
    DEFAULT_LANGUAGE: str = "en"

    # Rate limits, in the "<count>/<period>" notation of the limits library
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # e.g. redis://localhost:6379 to share counters across workers
    RATE_LIMIT_UPDATE_PROFILE: str = "20/hour"
    RATE_LIMIT_UPDATE_PASSWORD: str = "5/hour"
    RATE_LIMIT_UPDATE_USERNAME: str = "5/hour"
    RATE_LIMIT_UPDATE_AVATAR: str = "10/hour"

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", "LANGUAGES", mode="before")
    @classmethod
    def split_comma_separated(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("MAX_AVATAR_SIZE")
    @classmethod
    def validate_max_avatar_size(cls, v):
        if v > 10 * 1024 * 1024:  # 10MB max
            raise ValueError("MAX_AVATAR_SIZE cannot exceed 10MB")
        return v

    @property
    def async_database_url(self) -> str:
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
    )


settings = Settings()
