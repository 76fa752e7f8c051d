"""Singleton factory for the active backup provider."""

from __future__ import annotations

from functools import lru_cache

from .base import StorageProvider


@lru_cache(maxsize=1)
def get_storage_provider() -> StorageProvider:
    """
    Return the backup provider selected by configuration.

    - USE_REMOTE_STORAGE=true  -> SignedUrlStorageProvider (presigned URLs)
    - USE_REMOTE_STORAGE=false -> LocalStorageProvider (filesystem dev)

    The value is cached: credentials are resolved and the HTTP client is
    built once for the whole process.
    """
    from unleash_backup.config import get_settings

    settings = get_settings()

    if settings.use_remote_storage:
        from .credentials import CredentialResolver
        from .fetcher import RetryingFetcher
        from .signed_url_backend import SignedUrlStorageProvider
        from .signer import SignedURLIssuer
        from .transport import HttpTransport

        config = CredentialResolver.resolve(settings)
        issuer = SignedURLIssuer(config, default_ttl_seconds=settings.signed_url_ttl_seconds)
        transport = HttpTransport(timeout_seconds=settings.signed_url_ttl_seconds)
        fetcher = RetryingFetcher(
            issuer,
            transport,
            max_retries=settings.fetch_max_retries,
            base_delay_ms=settings.fetch_base_delay_ms,
        )
        return SignedUrlStorageProvider(settings.backup_path, issuer, transport, fetcher=fetcher)

    from .local_backend import LocalStorageProvider

    return LocalStorageProvider(settings.backup_path)
