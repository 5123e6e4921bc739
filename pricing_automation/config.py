"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Pricing Automation"

    # ── Notifications ────────────────────────────────────
    notification_max_retries: int = Field(default=3, ge=1)
    notification_retry_delay_seconds: float = Field(default=1.0, ge=0.0)

    # ── Audit ────────────────────────────────────────────
    audit_mirror_to_logging: bool = True

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
