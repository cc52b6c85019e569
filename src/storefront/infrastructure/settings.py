"""Application settings.

Read once from ``STOREFRONT_*`` environment variables (and an optional
``.env`` file) by ``load_settings()`` at process start, then passed
explicitly to the composition root. Nothing reads the environment later.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root when installed in editable mode.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=_DEFAULT_DATA_DIR, description="Directory holding store.json")
    currency: str = Field(default="ILS", min_length=3, max_length=3)

    default_low_stock_threshold: int = Field(default=5, ge=0)
    alert_retention_days: int = Field(default=30, ge=1)
    guest_wishlist_limit: int = Field(default=20, ge=1)

    # Bearer token that authenticates an ADMIN session on the HTTP API
    admin_token: str | None = None

    email_api_url: str = "https://api.resend.com/emails"
    email_api_key: str | None = None
    email_from: str = "onboarding@resend.dev"
    admin_email: str | None = None
    email_timeout_seconds: float = Field(default=10.0, gt=0)
    notification_max_attempts: int = Field(default=5, ge=1)

    log_level: str = "INFO"

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.upper()

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"


def load_settings(**overrides) -> Settings:
    """Build the settings object once at start-up."""
    return Settings(**overrides)
