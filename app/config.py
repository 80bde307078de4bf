"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with validation.
"""
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rentease.db",
        description="Async SQLAlchemy connection URL for the document store"
    )

    # Redis
    redis_url: str = Field(default="", description="Redis connection URL (empty disables caching)")
    redis_password: str = Field(default="", description="Redis password")

    # Security
    jwt_secret: str = Field(
        default="change-me-in-production-please-32chars!",
        min_length=32,
        description="JWT secret key (min 32 chars)"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expiration_hours: int = Field(default=24, description="JWT expiration time in hours")

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Cache TTL (in seconds)
    cache_user_ttl: int = Field(default=600, description="User cache TTL in seconds")

    # Cascade deletion
    cascade_max_concurrency: int = Field(
        default=25,
        ge=0,
        description="Maximum in-flight deletions per cascade stage (0 = unbounded)"
    )
    cascade_deadline_seconds: float = Field(
        default=0,
        ge=0,
        description="Deadline for a cascade removal in seconds (0 = no deadline)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    def get_allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


# Global settings instance
settings = Settings()
