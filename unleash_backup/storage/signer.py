"""Presigned URL issuance against an S3-compatible bucket."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import structlog

from unleash_backup.config import DEFAULT_SIGNED_URL_TTL_SECONDS
from unleash_backup.errors import AuthError, ConfigError

from .credentials import StorageConfig

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


class SignedAction(str, Enum):
    """HTTP verb a presigned URL is valid for."""

    READ = "read"
    WRITE = "write"

    @property
    def client_method(self) -> str:
        return "get_object" if self is SignedAction.READ else "put_object"

    @property
    def http_method(self) -> str:
        return "GET" if self is SignedAction.READ else "PUT"


@dataclass(frozen=True)
class SignedURL:
    """A URL granting one verb on one object until ``expires_at``."""

    url: str
    action: SignedAction
    object_name: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def __str__(self) -> str:
        return self.url


class SignedURLIssuer:
    """
    Sign capability URLs locally with boto3.

    - Signature S3v4, path-style addressing (AWS S3, MinIO, GCS interop)
    - The verb and, for writes, the JSON content type are part of the signature
    - No request leaves the process: signing needs only the key material
    """

    def __init__(self, config: StorageConfig, default_ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS) -> None:
        if not config.bucket:
            raise ConfigError("Signed URL issuer requires a bucket")
        if not config.access_key_id or not config.secret_access_key:
            raise ConfigError("Signed URL issuer requires credential material")
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be positive")

        import boto3
        from botocore.config import Config

        self.bucket = config.bucket
        self.default_ttl_seconds = default_ttl_seconds
        self._client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            aws_session_token=config.session_token,
            region_name=config.region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            ),
        )
        logger.info("signed_url_issuer.initialized", bucket=self.bucket, endpoint=config.endpoint_url)

    def issue(self, object_name: str, action: SignedAction, ttl_seconds: int | None = None) -> SignedURL:
        """Return a URL valid for ``action`` on ``object_name`` for ``ttl_seconds``."""
        from botocore.exceptions import BotoCoreError, ClientError

        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl_seconds must be positive")

        action = SignedAction(action)
        params = {"Bucket": self.bucket, "Key": object_name}
        if action is SignedAction.WRITE:
            params["ContentType"] = JSON_CONTENT_TYPE

        issued_at = datetime.now(timezone.utc)
        try:
            url = self._client.generate_presigned_url(
                action.client_method,
                Params=params,
                ExpiresIn=ttl,
                HttpMethod=action.http_method,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("signed_url.failed", object=object_name, action=action.value, error=str(exc))
            raise AuthError(f"Could not sign {action.value} URL for {object_name}: {exc}") from exc

        logger.debug("signed_url.issued", object=object_name, action=action.value, ttl=ttl)
        return SignedURL(
            url=url,
            action=action,
            object_name=object_name,
            expires_at=issued_at + timedelta(seconds=ttl),
        )
