"""
Shared HTTP plumbing for the API clients.

Every client owns a requests.Session with the configured User-Agent,
spaces its calls by a minimum interval, and turns every transport or
HTTP failure into a TransportError. Empty results are not errors and
are handled by the individual clients.
"""

import time
from typing import Any

import requests

from mvfinder.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from mvfinder.core.exceptions import TransportError
from mvfinder.core.logger import get_logger


logger = get_logger(__name__)


RATE_LIMIT_STATUS_CODES = (429, 503)


class ApiClient:
    """
    Base class for JSON-over-HTTP clients.

    Attributes:
        session: The requests session used for every call.
        timeout: Per-request timeout in seconds.
        min_interval: Minimum seconds between two requests of this client.
    """

    service_name = "API"

    def __init__(
        self,
        session: requests.Session | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        min_interval: float = 0.0
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })
        self.timeout = timeout
        self.min_interval = min_interval
        self.last_request_time = 0.0

    def _rate_limit(self) -> None:
        """Sleep until min_interval has passed since the previous request."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.min_interval:
            time.sleep(self.min_interval - elapsed)
        self.last_request_time = time.time()

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a URL and decode the JSON body.

        Raises:
            TransportError: On connection errors, timeouts, non-2xx
                            responses or a body that is not JSON.
        """
        self._rate_limit()
        logger.debug(f"{self.service_name} GET {url} {params or ''}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"{self.service_name} request failed with HTTP {status}",
                details={"url": url, "original_error": str(e)},
                status_code=status,
                is_rate_limit=status in RATE_LIMIT_STATUS_CODES,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"{self.service_name} request failed: {e}",
                details={"url": url, "original_error": str(e)},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{self.service_name} returned a response that is not JSON",
                details={"url": url, "original_error": str(e)},
                status_code=response.status_code,
            ) from e

    def close(self) -> None:
        self.session.close()
