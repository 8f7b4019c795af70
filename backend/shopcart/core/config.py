"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    app_name: str = "Shopping Cart API"

    # Database - relative SQLite file by default, override via env
    database_url: str = "sqlite:///./shopcart.db"
    db_echo: bool = False

    # Connection pool (ignored for SQLite)
    db_pool_size: int = 5
    db_max_overflow: int = 0
    db_pool_timeout: int = 30  # seconds to wait for a free connection
    db_pool_recycle: int = 1800  # seconds before an idle connection is recycled

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:3000"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: Optional[str] = None

    # API
    api_prefix: str = "/api"

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100  # requests per window
    rate_limit_window: int = 900  # window in seconds

    # Credentials
    password_hash_rounds: int = 12

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100

    @field_validator("password_hash_rounds")
    @classmethod
    def validate_hash_rounds(cls, v: int) -> int:
        # bcrypt only accepts cost factors in this range
        if not 4 <= v <= 31:
            raise ValueError("password_hash_rounds must be between 4 and 31")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
