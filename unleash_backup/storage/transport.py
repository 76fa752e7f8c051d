"""Single-attempt HTTP transfers against presigned URLs."""

from __future__ import annotations

import httpx
import structlog

from unleash_backup.config import DEFAULT_SIGNED_URL_TTL_SECONDS
from unleash_backup.errors import FailureKind, TransportError

from .signer import SignedURL

logger = structlog.get_logger(__name__)


def classify_status(status_code: int) -> FailureKind:
    """Map a non-2xx status to its failure kind."""
    if status_code == 404:
        return FailureKind.NOT_FOUND
    return FailureKind.TRANSIENT


class HttpTransport:
    """Wrapper httpx performing exactly one PUT or GET per call.

    Status codes are passed through unchanged inside ``TransportError``; the
    failure kind is assigned here and nowhere else.
    """

    def __init__(
        self,
        timeout_seconds: float | None = DEFAULT_SIGNED_URL_TTL_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = httpx.Timeout(timeout_seconds)
        self._owns_client = client is None
        self.session = client or httpx.AsyncClient(timeout=self.timeout)

    async def _send(self, method: str, url: str | SignedURL, **kwargs) -> httpx.Response:
        target = str(url)
        try:
            response = await self.session.request(method, target, **kwargs)
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
            raise TransportError(None, f"invalid URL: {exc}", FailureKind.FATAL) from exc
        except httpx.TimeoutException as exc:
            raise TransportError(None, f"timeout: {exc}", FailureKind.TRANSIENT) from exc
        except httpx.HTTPError as exc:
            raise TransportError(None, f"network error: {exc}", FailureKind.TRANSIENT) from exc

        if not response.is_success:
            raise TransportError(
                response.status_code,
                response.reason_phrase or "HTTP error",
                classify_status(response.status_code),
            )
        return response

    async def put(self, url: str | SignedURL, body: bytes, content_type: str = "application/json") -> None:
        """Upload ``body``; any 2xx response is success."""
        response = await self._send("PUT", url, content=body, headers={"Content-Type": content_type})
        logger.debug("transport.put_ok", status=response.status_code, size=len(body))

    async def get(self, url: str | SignedURL) -> bytes:
        """Download and return the raw response body."""
        response = await self._send("GET", url)
        logger.debug("transport.get_ok", status=response.status_code, size=len(response.content))
        return response.content

    async def close(self) -> None:
        """Close the HTTP session when this transport created it."""
        if self._owns_client:
            await self.session.aclose()
