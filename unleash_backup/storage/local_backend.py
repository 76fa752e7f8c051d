"""Filesystem backup provider, used in development."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, TypeVar

import structlog

from .base import StorageProvider
from .naming import object_name

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LocalStorageProvider(StorageProvider[T]):
    """
    Provider that keeps backups as JSON files on local disk.

    Used when USE_REMOTE_STORAGE=false. Backups are stored under
    backup_path/unleash-backup-{safe key}.json, the same names the remote
    provider uses for objects.
    """

    def __init__(self, backup_path: str | Path) -> None:
        if not str(backup_path):
            raise ValueError("backup_path is required")
        self.backup_path = Path(backup_path)

    def _resolve(self, key: str) -> Path:
        return self.backup_path / object_name(key)

    def _write(self, path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    async def set(self, key: str, data: T) -> None:
        if data is None:
            raise ValueError("Refusing to back up None: it is indistinguishable from a missing backup")
        path = self._resolve(key)
        await asyncio.to_thread(self._write, path, json.dumps(data))
        logger.debug("local_storage.saved", key=key, path=str(path))

    async def get(self, key: str) -> Any | None:
        path = self._resolve(key)
        raw = await asyncio.to_thread(self._read, path)
        if raw is None:
            logger.debug("local_storage.missing", key=key, path=str(path))
            return None
        return json.loads(raw)
