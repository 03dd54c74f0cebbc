"""HTTP client for the Gutendex search API with resilience patterns."""
import time
import random
import requests
from typing import Optional, Dict, Any
import logging

from litcatalog.errors import SearchFailure
from litcatalog.models import SearchResponse
from litcatalog.parse import parse_search_response

logger = logging.getLogger(__name__)


class GutendexClient:
    """Client for Gutendex with timeouts, retries, and backoff."""

    BASE_URL = "https://gutendex.com/books/"
    USER_AGENT = "litcatalog/0.1"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        base_backoff: float = 1.0
    ):
        """
        Initialize Gutendex API client.

        Args:
            base_url: Override for the books endpoint
            timeout: Request timeout in seconds (connect and read)
            max_retries: Maximum number of attempts
            base_backoff: Base delay for exponential backoff
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.max_retries = max(max_retries, 1)
        self.base_backoff = base_backoff

        # Create session for connection pooling
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        })

    def search(self, query: str, page: int = 1) -> SearchResponse:
        """
        Search for books by title or author text.

        Args:
            query: Search text, already normalized for querying
            page: Result page (Gutendex pages hold 32 records)

        Returns:
            Parsed search response

        Raises:
            SearchFailure: Transport error or non-success response
        """
        params: Dict[str, Any] = {"search": query}
        if page > 1:
            params["page"] = page

        payload = self._make_request_with_retry(self.base_url, params)

        try:
            return parse_search_response(payload)
        except (TypeError, ValueError) as e:
            logger.error(f"Unparseable search response: {e}")
            raise SearchFailure(f"Unexpected response shape from search service: {e}") from e

    def _make_request_with_retry(
        self,
        url: str,
        params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Make HTTP request with retry logic.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON object
        """
        last_error = "no attempt made"

        for attempt in range(self.max_retries):
            try:
                logger.info(f"Request attempt {attempt + 1}/{self.max_retries}: {url} {params}")

                response = self.session.get(
                    url,
                    params=params,
                    timeout=self.timeout
                )

                # Handle different status codes
                if response.status_code == 200:
                    logger.info(f"Success: {response.status_code}")
                    return self._decode(response)

                elif response.status_code == 429:
                    # Rate limited - must retry with backoff
                    logger.warning(f"Rate limited (429) on attempt {attempt + 1}")
                    last_error = "rate limited (429)"

                elif response.status_code >= 500:
                    # Server error - retryable
                    logger.warning(f"Server error ({response.status_code}) on attempt {attempt + 1}")
                    last_error = f"server error ({response.status_code})"

                else:
                    # Client error - don't retry
                    logger.error(f"Client error ({response.status_code}): {response.text}")
                    raise SearchFailure(f"Search service rejected request ({response.status_code})")

            except requests.exceptions.Timeout:
                logger.warning(f"Timeout on attempt {attempt + 1}")
                last_error = f"timed out after {self.timeout}s"

            except requests.exceptions.ConnectionError as e:
                logger.warning(f"Connection error on attempt {attempt + 1}: {e}")
                last_error = "connection error"

            except requests.exceptions.RequestException as e:
                logger.error(f"Unexpected request error: {e}")
                raise SearchFailure(f"Search request failed: {e}") from e

            if attempt < self.max_retries - 1:
                self._backoff(attempt)

        logger.error(f"All {self.max_retries} attempts failed")
        raise SearchFailure(f"Search service unavailable: {last_error}")

    def _decode(self, response: requests.Response) -> Dict[str, Any]:
        """Decode a 200 response body into a JSON object."""
        if not response.text or not response.text.strip():
            raise SearchFailure("Empty response from search service")

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchFailure(f"Invalid JSON from search service: {e}") from e

        if not isinstance(payload, dict):
            raise SearchFailure("Unexpected response shape from search service")
        return payload

    def _backoff(self, attempt: int):
        """
        Sleep with exponential backoff and jitter.

        Args:
            attempt: Current attempt number (0-indexed)
        """
        # Exponential backoff: base * 2^attempt
        delay = self.base_backoff * (2 ** attempt)

        # Add jitter: random value between 0 and delay
        jitter = random.uniform(0, delay)
        total_delay = delay + jitter

        logger.info(f"Backing off for {total_delay:.2f} seconds")
        time.sleep(total_delay)

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
