"""Configuration tests for backup storage settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from unleash_backup.config import Settings, get_settings


def _reload_settings():
    get_settings.cache_clear()
    return get_settings()


def test_storage_settings_defaults(monkeypatch) -> None:
    """Remote storage should be disabled and read-path policy at its defaults."""
    monkeypatch.delenv("USE_REMOTE_STORAGE", raising=False)
    monkeypatch.delenv("SIGNED_URL_TTL_SECONDS", raising=False)
    monkeypatch.delenv("FETCH_MAX_RETRIES", raising=False)
    monkeypatch.delenv("FETCH_BASE_DELAY_MS", raising=False)
    settings = _reload_settings()

    assert settings.use_remote_storage is False
    assert settings.signed_url_ttl_seconds == 900
    assert settings.fetch_max_retries == 5
    assert settings.fetch_base_delay_ms == 5000
    assert settings.storage_region == "us-east-1"


def test_storage_settings_from_env(monkeypatch) -> None:
    """Storage settings should be configurable from environment variables."""
    monkeypatch.setenv("USE_REMOTE_STORAGE", "true")
    monkeypatch.setenv("STORAGE_BUCKET", "unleash-prod")
    monkeypatch.setenv("STORAGE_ENDPOINT_URL", "https://storage.googleapis.com")
    monkeypatch.setenv("SIGNED_URL_TTL_SECONDS", "300")
    monkeypatch.setenv("FETCH_MAX_RETRIES", "3")

    settings = _reload_settings()
    assert settings.use_remote_storage is True
    assert settings.storage_bucket == "unleash-prod"
    assert settings.storage_endpoint_url == "https://storage.googleapis.com"
    assert settings.signed_url_ttl_seconds == 300
    assert settings.fetch_max_retries == 3


def test_blank_optional_storage_values_become_none(monkeypatch) -> None:
    monkeypatch.setenv("STORAGE_ENDPOINT_URL", "  ")
    monkeypatch.setenv("STORAGE_CREDENTIALS_B64", "")

    settings = _reload_settings()
    assert settings.storage_endpoint_url is None
    assert settings.storage_credentials_b64 is None


def test_signed_url_ttl_rejects_values_beyond_sigv4_limit(monkeypatch) -> None:
    monkeypatch.setenv("SIGNED_URL_TTL_SECONDS", str(8 * 24 * 3600))
    get_settings.cache_clear()

    with pytest.raises(ValidationError):
        _ = get_settings()


def test_inline_credentials_require_both_keys(monkeypatch) -> None:
    monkeypatch.setenv("STORAGE_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.delenv("STORAGE_SECRET_ACCESS_KEY", raising=False)
    assert _reload_settings().has_inline_credentials is False

    monkeypatch.setenv("STORAGE_SECRET_ACCESS_KEY", "secret")
    assert _reload_settings().has_inline_credentials is True


def test_settings_ignore_dotenv_outside_working_directory(monkeypatch, tmp_path) -> None:
    """A .env next to the project must not leak into settings when the cwd has none."""
    developer_dir = tmp_path / "developer-checkout"
    developer_dir.mkdir()
    (developer_dir / ".env").write_text("STORAGE_BUCKET=developer-bucket\n", encoding="utf-8")
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    assert _reload_settings().storage_bucket == ""

    monkeypatch.chdir(developer_dir)
    assert _reload_settings().storage_bucket == "developer-bucket"


def test_settings_expose_only_backup_store_fields() -> None:
    assert "env" not in Settings.model_fields
    assert {"backup_path", "use_remote_storage", "storage_bucket", "signed_url_ttl_seconds"} <= set(
        Settings.model_fields
    )
