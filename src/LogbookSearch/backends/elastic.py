"""Elasticsearch HTTP client.

Executes a compiled search request against the ``_search`` endpoint, with
retry/backoff on throttling, server errors and transport failures.
"""

from __future__ import annotations

import random
import time
from typing import Any, Optional

import requests

from LogbookSearch.core.models import CompiledSearchRequest
from LogbookSearch.utils.log import log

DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 4
BASE_PAUSE = 0.5
MAX_SLEEP = 10.0

RETRYABLE_STATUS = {429, 502, 503, 504}

HEADERS = {
    "User-Agent": "logbook-search/0.1",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ElasticSearchClient:
    """Low-level HTTP client for the search backend.

    Responsible only for sending the request body and returning the decoded
    response; mapping hits to domain objects happens in the search service.
    """

    name = "elasticsearch"

    def __init__(self, base_url: str, *, timeout: Optional[float] = None) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            base_url: Cluster base URL, e.g. ``http://localhost:9200``.
            timeout: HTTP timeout in seconds for each attempt.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._session = requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> ElasticSearchClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute(self, request: CompiledSearchRequest) -> dict[str, Any]:
        """Execute a compiled request and return the decoded JSON response.

        Args:
            request: Compiled search request.

        Returns:
            Response body as a dict.

        Raises:
            requests.exceptions.RequestException: Last error after all retries,
                or the first non-retryable HTTP error.
        """
        url = f"{self.base_url}/{request.index}/_search"
        body = request.to_body()
        log.debug("Search request: url=%s size=%d", url, request.size)
        resp = self._post_with_retry(url, body=body)
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError("Search response must be a JSON object")
        return payload

    def _post_with_retry(self, url: str, *, body: dict[str, Any]) -> requests.Response:
        """Issue POST request with retry/backoff.

        Retries on timeouts, connection errors and ``RETRYABLE_STATUS``.
        """
        last_err: Exception | None = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                resp = self._session.post(url, json=body, headers=HEADERS, timeout=self.timeout)
                if resp.status_code in RETRYABLE_STATUS:
                    raise requests.exceptions.HTTPError(f"HTTP {resp.status_code}", response=resp)
                return resp
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_err = e
            except requests.exceptions.HTTPError as e:
                last_err = e

            if attempt < MAX_ATTEMPTS:
                log.debug("Search retrying after attempt %d/%d (error=%s)", attempt, MAX_ATTEMPTS, last_err)
                self._sleep_backoff(attempt)

        assert last_err is not None
        raise last_err

    @staticmethod
    def _sleep_backoff(attempt: int) -> None:
        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.25), MAX_SLEEP)
        time.sleep(delay)
