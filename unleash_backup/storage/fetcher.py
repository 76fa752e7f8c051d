"""Read-path retry state machine for backup downloads."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

import structlog

from unleash_backup.errors import FailureKind, RetriesExhausted, TransportError

from .signer import SignedAction, SignedURLIssuer
from .transport import HttpTransport

logger = structlog.get_logger(__name__)

MAX_RETRIES = 5
BASE_DELAY_MS = 5000

Sleep = Callable[[float], Awaitable[Any]]


class FetchState(str, Enum):
    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class AttemptState:
    """Per-call bookkeeping; never shared between fetches."""

    attempt: int = 1
    state: FetchState = FetchState.ATTEMPTING
    last_error: TransportError | None = None
    delay_ms: int = 0


@dataclass(frozen=True)
class FetchResult:
    """Terminal outcome of one fetch."""

    state: FetchState
    payload: Any = None
    attempts: int = 1
    delays_ms: tuple[int, ...] = field(default_factory=tuple)


def backoff_delay_ms(attempt: int, base_delay_ms: int = BASE_DELAY_MS) -> int:
    """Delay before the attempt following ``attempt`` (1-based), without jitter."""
    if attempt < 1:
        raise ValueError("attempt is 1-based")
    return base_delay_ms * 2 ** (attempt - 1)


class RetryingFetcher:
    """
    Download one JSON object through fresh presigned URLs.

    Each attempt signs a new READ URL, so a long backoff sequence never runs
    into an expired URL. 404 ends the fetch without error; transient failures
    back off exponentially (5s, 10s, 20s, 40s) up to ``max_retries`` attempts;
    signing and fatal transport failures propagate immediately.
    """

    def __init__(
        self,
        issuer: SignedURLIssuer,
        transport: HttpTransport,
        max_retries: int = MAX_RETRIES,
        base_delay_ms: int = BASE_DELAY_MS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.issuer = issuer
        self.transport = transport
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self._sleep = sleep

    async def _attempt(self, object_name: str) -> Any:
        signed = self.issuer.issue(object_name, SignedAction.READ)
        body = await self.transport.get(signed)
        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(200, f"undecodable JSON body: {exc}", FailureKind.TRANSIENT) from exc

    async def fetch(self, object_name: str) -> FetchResult:
        """Run the state machine to a terminal state for ``object_name``."""
        current = AttemptState()
        delays: list[int] = []

        while True:
            try:
                payload = await self._attempt(object_name)
            except TransportError as exc:
                if exc.is_not_found:
                    current.state = FetchState.NOT_FOUND
                    logger.info("fetch.not_found", object=object_name, attempt=current.attempt)
                    return FetchResult(FetchState.NOT_FOUND, None, current.attempt, tuple(delays))
                if not exc.is_retryable:
                    logger.error("fetch.fatal", object=object_name, attempt=current.attempt, error=str(exc))
                    raise
                current.last_error = exc
            else:
                current.state = FetchState.SUCCESS
                logger.debug("fetch.success", object=object_name, attempt=current.attempt)
                return FetchResult(FetchState.SUCCESS, payload, current.attempt, tuple(delays))

            logger.warning(
                "fetch.attempt_failed",
                object=object_name,
                attempt=current.attempt,
                max_retries=self.max_retries,
                status=current.last_error.status,
                error=current.last_error.message,
            )

            if current.attempt >= self.max_retries:
                current.state = FetchState.FAILED
                logger.error("fetch.retries_exhausted", object=object_name, attempts=current.attempt)
                raise RetriesExhausted(current.attempt, current.last_error) from current.last_error

            current.delay_ms = backoff_delay_ms(current.attempt, self.base_delay_ms)
            current.state = FetchState.BACKOFF
            logger.info("fetch.backoff", object=object_name, attempt=current.attempt, delay_ms=current.delay_ms)
            await self._sleep(current.delay_ms / 1000)
            delays.append(current.delay_ms)

            current.attempt += 1
            current.state = FetchState.ATTEMPTING
