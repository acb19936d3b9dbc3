"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_prep"

    # JWT issued by the identity provider
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Comma-separated admin allow-list (case-insensitive)
    admin_emails: str = ""

    # Welcome webhook (empty disables)
    welcome_webhook_url: str = ""
    webhook_timeout_seconds: float = 10.0

    # Object storage for company videos (empty bucket disables signed URLs)
    aws_region: str = "us-east-1"
    bucket_name: str = ""
    signed_url_expiry_seconds: int = 600

    # Compensation
    stock_vesting_years: int = 4

    # Notifications
    notification_list_limit: int = 50

    # App
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def admin_email_list(self) -> List[str]:
        """Normalized admin emails"""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
