"""Abstract interface for backup storage providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class StorageProvider(ABC, Generic[T]):
    """Common contract for the filesystem (dev) and signed-URL (prod) providers."""

    @abstractmethod
    async def set(self, key: str, data: T) -> None:
        """Persist ``data`` as the backup for ``key``. Raises on any failure.

        ``None`` is rejected with ValueError: it would read back as "no backup".
        """

    @abstractmethod
    async def get(self, key: str) -> T | None:
        """Return the backup for ``key``, or None when none exists."""

    async def close(self) -> None:
        """Release provider resources."""
