# ABOUTME: HTTP client for fetching mass-import feeds from open-data portals.
# ABOUTME: Spaces out paged requests, retries transient failures, and accepts a test transport.

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Upper bound on a server-requested Retry-After wait.
_MAX_RETRY_AFTER_SECONDS = 60.0


class ImportFetchError(Exception):
    """Raised when an import feed cannot be fetched or is not JSON."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON GET requests against an import feed."""

    def get(self, url: str, params: dict[str, str] | None = None) -> Any: ...


def _retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("retry-after", "").strip()
    if not raw:
        return None
    try:
        return min(max(float(raw), 0.0), _MAX_RETRY_AFTER_SECONDS)
    except ValueError:
        # HTTP-date form; fall back to our own backoff.
        return None


class CatalogHttpClient:
    """Fetches JSON pages from open-data portals.

    Paged feeds are read with one request per page, so consecutive requests
    are spaced by min_request_interval. Transient failures (429, 5xx) are
    retried with exponential backoff, or after the server's Retry-After
    delay when that is longer.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.5,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": "artcatalog/0.1.0", "Accept": "application/json"},
            "timeout": 30.0,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request_time: float = 0.0

    def get(self, url: str, params: dict[str, str] | None = None) -> Any:
        """Fetch one JSON document, e.g. a single page of a feed.

        Args:
            url: Feed URL.
            params: Query parameters such as paging limit and offset.

        Returns:
            The decoded JSON body.

        Raises:
            ImportFetchError: On a connection failure, a non-retryable status,
                exhausted retries, or a body that is not JSON.
        """
        attempts = 1 + self._max_retries
        for attempt in range(1, attempts + 1):
            self._wait_for_slot()
            try:
                response = self._client.get(url, params=params)
            except httpx.HTTPError as exc:
                raise ImportFetchError(f"Request failed: {url}: {exc}") from exc

            if response.status_code == 200:
                try:
                    return response.json()
                except ValueError as exc:
                    raise ImportFetchError(f"Response from {url} is not JSON") from exc

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise ImportFetchError(f"HTTP {response.status_code} from {url}")
            if attempt == attempts:
                break

            delay = self._backoff(attempt, response)
            logger.warning(
                "HTTP %d from %s, retrying in %.1fs (retry %d of %d)",
                response.status_code, url, delay, attempt, self._max_retries,
            )
            time.sleep(delay)

        raise ImportFetchError(
            f"HTTP {response.status_code} from {url} after {attempts} attempts"
        )

    def close(self) -> None:
        self._client.close()

    def _backoff(self, attempt: int, response: httpx.Response) -> float:
        delay = self._retry_delay * (2 ** (attempt - 1))
        requested = _retry_after(response)
        return max(delay, requested) if requested is not None else delay

    def _wait_for_slot(self) -> None:
        """Sleep until min_request_interval has passed since the last request."""
        if self._min_interval > 0 and self._last_request_time > 0:
            remaining = self._min_interval - (time.monotonic() - self._last_request_time)
            if remaining > 0:
                time.sleep(remaining)
        self._last_request_time = time.monotonic()
