"""Error taxonomy for the backup store."""

from __future__ import annotations

from enum import Enum


class BackupError(RuntimeError):
    """Base class for every failure raised by the backup store."""


class ConfigError(BackupError):
    """Raised when required storage configuration is missing or unreadable."""


class AuthError(BackupError):
    """Raised when a presigned URL cannot be produced."""


class FailureKind(str, Enum):
    """Classification assigned to a transport failure where it is observed."""

    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    FATAL = "fatal"


class TransportError(BackupError):
    """A single HTTP transfer failed.

    ``status`` is the HTTP status code, or ``None`` when no response was
    received (connection reset, timeout, DNS failure).
    """

    def __init__(self, status: int | None, message: str, kind: FailureKind = FailureKind.TRANSIENT) -> None:
        self.status = status
        self.message = message
        self.kind = kind
        super().__init__(f"{status if status is not None else 'no response'}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.kind is FailureKind.NOT_FOUND

    @property
    def is_retryable(self) -> bool:
        return self.kind is FailureKind.TRANSIENT


class RetriesExhausted(BackupError):
    """Raised when every read attempt failed with a retryable error."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Backup read failed after {attempts} attempts: {last_error}")
