"""Application configuration"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Property Rentals"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Property rental listings with account management"

    # Security
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = "HS256"
    SESSION_MAX_AGE_DAYS: int = Field(default=30)
    SESSION_COOKIE_NAME: str = Field(default="session_token")
    SESSION_COOKIE_SECURE: bool = Field(default=False)
    OAUTH_STATE_COOKIE_NAME: str = Field(default="oauth_state")
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Database
    DATABASE_URL: str = Field(...)
    DB_ECHO: bool = Field(default=False)

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(default=10)
    MAX_PAGE_SIZE: int = Field(default=100)
    FEATURED_PROPERTIES_LIMIT: int = Field(default=3)

    # Third-party identity providers
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None)
    GOOGLE_CLIENT_SECRET: Optional[str] = Field(default=None)
    GITHUB_CLIENT_ID: Optional[str] = Field(default=None)
    GITHUB_CLIENT_SECRET: Optional[str] = Field(default=None)

    # CORS
    ALLOWED_HOSTS: list[str] = Field(default=["http://localhost:3000"])

    # Application URLs
    FRONTEND_URL: str = Field(default="http://localhost:3000")
    BACKEND_URL: str = Field(default="http://localhost:8000")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)  # file handlers only when set

    # Development
    DEBUG: bool = Field(default=False)
    TESTING: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
