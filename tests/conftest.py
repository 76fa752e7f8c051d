"""Pytest environment isolation for backup store tests.

Tests must never read a developer's .env storage credentials or write into
the real backup directory.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

import pytest

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="unleash-backup-pytest-")).resolve()

os.environ["BACKUP_PATH"] = str(_TEST_ROOT / "backups")
os.environ["USE_REMOTE_STORAGE"] = "false"
for _name in (
    "STORAGE_BUCKET",
    "STORAGE_ACCESS_KEY_ID",
    "STORAGE_SECRET_ACCESS_KEY",
    "STORAGE_SESSION_TOKEN",
    "STORAGE_CREDENTIALS_B64",
    "STORAGE_ENDPOINT_URL",
):
    os.environ.pop(_name, None)

from unleash_backup.config import get_settings
from unleash_backup.storage.credentials import StorageConfig
from unleash_backup.storage.factory import get_storage_provider

get_settings.cache_clear()

TEST_ENDPOINT = "https://storage.example.test"
TEST_BUCKET = "flag-backups"


@pytest.fixture(scope="session", autouse=True)
def _cleanup_test_root() -> None:
    yield
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture(autouse=True)
def _isolate_working_directory(monkeypatch, tmp_path: Path) -> None:
    """Settings resolve .env relative to the cwd; run each test from an empty directory."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_caches() -> None:
    """Every test starts from fresh settings and a fresh provider."""
    get_settings.cache_clear()
    get_storage_provider.cache_clear()
    yield
    get_settings.cache_clear()
    get_storage_provider.cache_clear()


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(
        bucket=TEST_BUCKET,
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        region="us-east-1",
        endpoint_url=TEST_ENDPOINT,
    )


class RecordingSleep:
    """Async sleep replacement that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def delays_ms(self) -> list[int]:
        return [round(seconds * 1000) for seconds in self.calls]


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
