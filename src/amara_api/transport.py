"""HTTP transport with a bounded retry budget.

The transport only obtains a body: it never inspects status codes or
payloads. A retry happens only when no response was obtained at all
(connection failures, timeouts, protocol errors at the socket level).
"""

from __future__ import annotations

import time

import httpx
from loguru import logger

from .config import ClientSettings
from .errors import ArgumentError, TransportError

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
USER_AGENT = "amara-api-python/0.4"


def _trace_request(request: httpx.Request) -> None:
    logger.debug(f"> {request.method} {request.url}")


def _trace_response(response: httpx.Response) -> None:
    logger.debug(f"< {response.status_code} {response.request.method} {response.request.url}")


def build_http_client(settings: ClientSettings | None = None) -> httpx.Client:
    """Create an ``httpx.Client`` honouring TLS and tracing settings."""
    settings = settings or ClientSettings()
    event_hooks: dict[str, list] = {"request": [], "response": []}
    if settings.verbose:
        event_hooks = {"request": [_trace_request], "response": [_trace_response]}
    return httpx.Client(
        timeout=httpx.Timeout(settings.timeout),
        verify=settings.verify_tls,
        headers={"User-Agent": USER_AGENT},
        event_hooks=event_hooks,
    )


class Transport:
    """Send one request, retrying on transport-level failures."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or build_http_client()

    def send(
        self,
        method: str,
        headers: dict[str, str],
        url: str,
        body: str | bytes | None = None,
        *,
        settings: ClientSettings,
    ) -> bytes:
        """Return the raw response body.

        Makes at most ``settings.retries + 1`` attempts.

        Raises:
            ArgumentError: If ``method`` is not GET, POST, PUT or DELETE.
            TransportError: If every attempt failed to obtain a response.
        """
        method = method.upper() if isinstance(method, str) else method
        if method not in SUPPORTED_METHODS:
            raise ArgumentError(f"Unsupported HTTP method: {method!r}")
        # Only POST and PUT carry a payload.
        content = body if method in ("POST", "PUT") else None

        attempts = 0
        last_error: httpx.TransportError | None = None
        while attempts <= settings.retries:
            if attempts and settings.retry_backoff:
                time.sleep(settings.retry_backoff)
            attempts += 1
            try:
                response = self._client.request(
                    method, url, headers=headers, content=content, timeout=settings.timeout
                )
            except httpx.TransportError as exc:
                last_error = exc
                logger.warning(
                    f"Transport failure on attempt {attempts}/{settings.retries + 1}: "
                    f"{method} {url}: {exc!r}"
                )
                continue

            if not response.is_success:
                logger.warning(f"{method} {url} answered HTTP {response.status_code}")
            return response.content

        raise TransportError(
            f"No response after {attempts} attempts: {method} {url}",
            method=method,
            url=url,
            attempts=attempts,
            context={"error": repr(last_error)},
        )

    def close(self) -> None:
        self._client.close()
