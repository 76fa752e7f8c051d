"""Backup store settings and environment configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SIGNED_URL_TTL_SECONDS = 900
# SigV4 presigned URLs cannot outlive seven days.
MAX_SIGNED_URL_TTL_SECONDS = 7 * 24 * 3600


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    backup_path: str = "./data/backups"
    use_remote_storage: bool = False

    # Remote object store reached through presigned URLs
    storage_bucket: str = ""
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""
    storage_session_token: str | None = None
    storage_credentials_b64: str | None = None
    storage_endpoint_url: str | None = None
    storage_region: str = "us-east-1"

    signed_url_ttl_seconds: int = Field(
        default=DEFAULT_SIGNED_URL_TTL_SECONDS, ge=1, le=MAX_SIGNED_URL_TTL_SECONDS
    )
    fetch_max_retries: int = Field(default=5, ge=1, le=20)
    fetch_base_delay_ms: int = Field(default=5000, ge=0, le=600000)

    log_json: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @model_validator(mode="after")
    def validate_storage_settings(self) -> "Settings":
        """Normalize blank optional storage values to None."""
        if self.storage_endpoint_url is not None and not self.storage_endpoint_url.strip():
            self.storage_endpoint_url = None
        if self.storage_credentials_b64 is not None and not self.storage_credentials_b64.strip():
            self.storage_credentials_b64 = None
        if self.storage_session_token is not None and not self.storage_session_token.strip():
            self.storage_session_token = None
        return self

    @property
    def has_inline_credentials(self) -> bool:
        """Return True when discrete access/secret keys are both configured."""
        return bool(self.storage_access_key_id.strip() and self.storage_secret_access_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
