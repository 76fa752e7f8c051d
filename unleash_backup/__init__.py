"""Unleash feature-flag backups stored through presigned object-store URLs."""

from unleash_backup.errors import (
    AuthError,
    BackupError,
    ConfigError,
    FailureKind,
    RetriesExhausted,
    TransportError,
)
from unleash_backup.storage import (
    LocalStorageProvider,
    SignedUrlStorageProvider,
    StorageProvider,
    get_storage_provider,
)

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "BackupError",
    "ConfigError",
    "FailureKind",
    "LocalStorageProvider",
    "RetriesExhausted",
    "SignedUrlStorageProvider",
    "StorageProvider",
    "TransportError",
    "get_storage_provider",
]
