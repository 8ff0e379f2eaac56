"""
Configuration and settings for the site backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")
    docs_url: str = Field(default="/api-docs")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    # Document store (any SQLAlchemy URL, e.g. Postgres)
    database_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "DB_URI")
    )

    # S3 bucket holding project/partner images and videos
    bucket_name: Optional[str] = Field(default=None)
    bucket_region: str = Field(default="us-east-1")
    s3_endpoint: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
    )
    storage_max_attempts: int = Field(default=3, ge=1)
    upload_max_workers: int = Field(default=5, ge=1)
    max_project_images: int = Field(default=5, ge=1)

    # Tokens
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=15)
    refresh_token_expire_days: int = Field(default=7)

    # Contact form relay
    email_recipient: Optional[str] = Field(default=None)
    smtp_timeout_seconds: float = Field(default=30.0)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
