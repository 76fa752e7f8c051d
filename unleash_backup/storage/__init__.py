"""Backup providers: local filesystem (dev) and presigned URLs (prod)."""

from .base import StorageProvider
from .factory import get_storage_provider
from .local_backend import LocalStorageProvider
from .signed_url_backend import SignedUrlStorageProvider

__all__ = ["LocalStorageProvider", "SignedUrlStorageProvider", "StorageProvider", "get_storage_provider"]
