"""Application settings and configuration."""

import sys
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "teamhub"
    env: str = "development"
    allowed_origins: str = "http://localhost:3000"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log output format",
    )

    # Database
    database_url: str = "sqlite:///./teamhub.db"

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    billing_plan_env: str = "dev"  # Key into the plan tables (dev, test, prod)

    # Frontend
    frontend_domain_url: str = "http://localhost:3000"

    # Email (SendGrid)
    site_name: str = "Teamhub"
    sendgrid_api_key: str | None = None
    sender_email_address: str = "no-reply@example.com"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()


def check_production_settings(settings: Settings) -> None:
    """Abort startup when production is missing required secrets."""
    if settings.env != "production":
        return

    missing = [
        name
        for name in ("stripe_secret_key", "stripe_webhook_secret")
        if not getattr(settings, name)
    ]
    if missing:
        print(
            f"\n❌  FATAL: missing required settings in production: {', '.join(missing)}\n",
            file=sys.stderr,
        )
        sys.exit(1)
