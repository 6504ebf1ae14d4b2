"""
HTTP client for the NOAA National Water Prediction Service (NWPS) API.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import ClientConfig
from .exceptions import (
    NWPSBadRequestError,
    NWPSConnectionError,
    NWPSError,
    NWPSNotFoundError,
    NWPSQueryError,
    NWPSServerError,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429}


def _is_retryable(exc: BaseException) -> bool:
    """Connection failures, rate limiting and 5xx responses are retried."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status >= 500 or status in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


def _clean_query(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop unset parameters and render booleans the way the API expects."""
    params: Dict[str, Any] = {}
    if not query:
        return params
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = value
    return params


class NWPSClient:
    """
    Client for accessing data via the NWPS REST API.

    The client owns a connection pool and a read-only :class:`ClientConfig`.
    It knows nothing about the response schemas; it returns decoded JSON.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = config or ClientConfig()
        if timeout is not None:
            config = config.with_overrides(timeout=timeout)
        self.config = config
        self._client = httpx.Client(
            timeout=config.timeout,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    @property
    def timeout(self) -> float:
        return self.config.timeout

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "NWPSClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(
                multiplier=self.config.backoff_factor,
                max=self.config.max_backoff,
            ),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _send(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        response = self._client.get(url, params=params)
        response.raise_for_status()
        return response

    def request(
        self, endpoint: str, query: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """
        Make a GET request to the NWPS API with retry and error handling.

        Args:
            endpoint: Path below the base URL, e.g. ``/gauges/PTTP1``
            query: Query parameters; ``None`` values are omitted

        Returns:
            Decoded JSON body

        Raises:
            NWPSNotFoundError: HTTP 404
            NWPSBadRequestError: HTTP 400
            NWPSServerError: HTTP 5xx after retries
            NWPSConnectionError: No HTTP response could be obtained
            NWPSQueryError: Any other HTTP failure or an undecodable body
        """
        url = self.config.url_for(endpoint)
        params = _clean_query(query)
        logger.debug(f"GET {url} params={params}")

        try:
            response = self._retrying()(self._send, url, params)
        except httpx.TimeoutException as e:
            raise NWPSConnectionError(
                f"Failed to connect to NWPS API: request to {url} timed out "
                f"after {self.timeout}s. Check your internet connection.",
                endpoint=endpoint,
            ) from e
        except httpx.HTTPStatusError as e:
            raise self._status_error(e, endpoint, url) from e
        except httpx.RequestError as e:
            raise NWPSConnectionError(
                f"Failed to connect to NWPS API. Check your internet connection. Error: {e}",
                endpoint=endpoint,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise NWPSQueryError(
                f"Invalid JSON response from {url}: {e}",
                endpoint=endpoint,
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _status_error(
        error: httpx.HTTPStatusError, endpoint: str, url: str
    ) -> NWPSError:
        status = error.response.status_code
        if status == 404:
            return NWPSNotFoundError(
                f"Resource not found. Check that the identifier or endpoint is correct. "
                f"API returned 404 for: {url}",
                endpoint=endpoint,
                status_code=status,
            )
        elif status == 400:
            return NWPSBadRequestError(
                f"Invalid request parameters. Check that all parameters are valid. "
                f"API returned 400 for: {url}",
                endpoint=endpoint,
                status_code=status,
            )
        elif status >= 500:
            return NWPSServerError(
                f"NWPS API server error. The server may be temporarily unavailable, "
                f"try again later. API returned {status} for: {url}",
                endpoint=endpoint,
                status_code=status,
            )
        return NWPSQueryError(
            f"HTTP error {status} for: {url}",
            endpoint=endpoint,
            status_code=status,
        )


def path_segment(value: str) -> str:
    """Percent-encode one path segment (identifiers may contain reserved characters)."""
    return quote(value, safe="")


def fetch_json(
    endpoint: str,
    query: Optional[Mapping[str, Any]] = None,
    client: Optional[NWPSClient] = None,
) -> Any:
    """
    Issue one request, through ``client`` or a short-lived default client.
    """
    if client is not None:
        return client.request(endpoint, query)
    with NWPSClient() as owned:
        return owned.request(endpoint, query)
