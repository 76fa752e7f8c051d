"""Backup provider writing and reading through presigned URLs."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, TypeVar

import structlog

from .base import StorageProvider
from .fetcher import FetchState, RetryingFetcher
from .naming import object_name
from .signer import JSON_CONTENT_TYPE, SignedAction, SignedURLIssuer
from .transport import HttpTransport

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SignedUrlStorageProvider(StorageProvider[T]):
    """
    Snapshot store for restricted networks.

    Only presigned URLs cross the network boundary, so the process never needs
    to reach the provider's token endpoints.

    - ``set``: local staging copy, then exactly one PUT (no retry)
    - ``get``: delegated to ``RetryingFetcher`` (fresh URL per attempt)
    Staging files live under ``backup_path`` and are never read back.
    """

    def __init__(
        self,
        backup_path: str | Path,
        issuer: SignedURLIssuer,
        transport: HttpTransport,
        fetcher: RetryingFetcher | None = None,
    ) -> None:
        if not str(backup_path):
            raise ValueError("backup_path is required")
        self.backup_path = Path(backup_path)
        self.issuer = issuer
        self.transport = transport
        self.fetcher = fetcher or RetryingFetcher(issuer, transport)

    def staging_path(self, key: str) -> Path:
        return self.backup_path / object_name(key)

    def _write_staging(self, path: Path, body: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)

    async def set(self, key: str, data: T) -> None:
        if data is None:
            raise ValueError("Refusing to back up None: it is indistinguishable from a missing backup")
        name = object_name(key)
        body = json.dumps(data).encode("utf-8")

        staging = self.staging_path(key)
        await asyncio.to_thread(self._write_staging, staging, body)
        logger.debug("snapshot.staged", key=key, path=str(staging), size=len(body))

        signed = self.issuer.issue(name, SignedAction.WRITE)
        try:
            await self.transport.put(signed, body, JSON_CONTENT_TYPE)
        except Exception as exc:
            logger.error("snapshot.upload_failed", key=key, object=name, error=str(exc))
            raise
        logger.info("snapshot.uploaded", key=key, object=name, size=len(body))

    async def get(self, key: str) -> Any | None:
        name = object_name(key)
        logger.debug("snapshot.fetching", key=key, object=name)
        result = await self.fetcher.fetch(name)
        if result.state is FetchState.NOT_FOUND:
            return None
        logger.info("snapshot.fetched", key=key, object=name, attempts=result.attempts)
        return result.payload

    async def close(self) -> None:
        await self.transport.close()
