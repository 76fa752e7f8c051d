"""Resolve storage credentials once into an immutable configuration object."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass

import structlog

from unleash_backup.config import Settings
from unleash_backup.errors import ConfigError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StorageConfig:
    """Bucket identity and signing material shared by every operation."""

    bucket: str
    access_key_id: str
    secret_access_key: str
    region: str = "us-east-1"
    endpoint_url: str | None = None
    session_token: str | None = None

    def __repr__(self) -> str:
        return (
            f"StorageConfig(bucket={self.bucket!r}, access_key_id={self.access_key_id!r}, "
            f"region={self.region!r}, endpoint_url={self.endpoint_url!r})"
        )


class CredentialResolver:
    """Turn raw settings into a validated ``StorageConfig``.

    Credentials come either from the discrete ``STORAGE_ACCESS_KEY_ID`` /
    ``STORAGE_SECRET_ACCESS_KEY`` pair or from ``STORAGE_CREDENTIALS_B64``, a
    base64-encoded JSON document with ``access_key_id`` and
    ``secret_access_key`` (and optionally ``session_token``). The discrete pair
    wins when both are present.
    """

    @staticmethod
    def decode_credentials_blob(blob: str) -> dict[str, str]:
        """Decode a base64 JSON credential document."""
        try:
            raw = base64.b64decode(blob.strip(), validate=True)
            document = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigError("STORAGE_CREDENTIALS_B64 is not valid base64-encoded JSON") from exc

        if not isinstance(document, dict):
            raise ConfigError("STORAGE_CREDENTIALS_B64 must decode to a JSON object")

        access_key_id = str(document.get("access_key_id") or "").strip()
        secret_access_key = str(document.get("secret_access_key") or "").strip()
        if not access_key_id or not secret_access_key:
            raise ConfigError("STORAGE_CREDENTIALS_B64 is missing access_key_id or secret_access_key")

        decoded = {"access_key_id": access_key_id, "secret_access_key": secret_access_key}
        session_token = str(document.get("session_token") or "").strip()
        if session_token:
            decoded["session_token"] = session_token
        return decoded

    @classmethod
    def resolve(cls, settings: Settings) -> StorageConfig:
        bucket = settings.storage_bucket.strip()
        if not bucket:
            raise ConfigError("Missing storage bucket: set STORAGE_BUCKET")

        if settings.has_inline_credentials:
            access_key_id = settings.storage_access_key_id.strip()
            secret_access_key = settings.storage_secret_access_key.strip()
            session_token = settings.storage_session_token
            source = "inline"
        elif settings.storage_credentials_b64:
            decoded = cls.decode_credentials_blob(settings.storage_credentials_b64)
            access_key_id = decoded["access_key_id"]
            secret_access_key = decoded["secret_access_key"]
            session_token = decoded.get("session_token")
            source = "b64"
        else:
            raise ConfigError(
                "Missing storage credentials: set STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY "
                "or STORAGE_CREDENTIALS_B64"
            )

        config = StorageConfig(
            bucket=bucket,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            region=settings.storage_region,
            endpoint_url=settings.storage_endpoint_url,
            session_token=session_token,
        )
        logger.info(
            "storage_credentials.resolved",
            bucket=bucket,
            source=source,
            endpoint=settings.storage_endpoint_url,
            region=settings.storage_region,
        )
        return config
