from typing import Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base_source import (
    AuthenticationError,
    BaseSource,
    DataSourceError,
    RateLimitError,
)

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class HttpSource(BaseSource):
    """Downloads the match sheet over HTTP(S), retrying transient failures."""

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 4,
        backoff: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.location = url
        self.max_attempts = max_attempts
        self.backoff = backoff
        headers: Dict[str, str] = {"Accept": "text/csv, text/plain, */*"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )
        self.client.headers.update(headers)

    async def _request(self) -> httpx.Response:
        logger.debug(f"Requesting match data from {self.location}")
        response = await self.client.get(self.location)

        if response.status_code in {401, 403}:
            logger.warning(
                f"Authentication error ({response.status_code}) fetching {self.location}. Check the data source token."
            )
            raise AuthenticationError(
                f"Authentication failed ({response.status_code}) for {self.location}"
            )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(
                f"Rate limit hit (429) for {self.location}. Retry-After: {retry_after}"
            )
            raise RateLimitError(f"Rate limited by {self.location}")

        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.warning(
                f"Retrying match data request due to status {response.status_code}"
            )
            response.raise_for_status()

        return response

    async def fetch_text(self) -> str:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.backoff, min=0, max=10),
                retry=retry_if_exception_type(
                    (httpx.RequestError, httpx.HTTPStatusError, RateLimitError)
                ),
                reraise=True,
            ):
                with attempt:
                    response = await self._request()
        except (AuthenticationError, RateLimitError) as e:
            logger.error(f"Giving up on match data from {self.location}: {e}")
            raise
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Match data request failed with status {e.response.status_code} after {self.max_attempts} attempts"
            )
            raise DataSourceError(f"HTTP error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Network error fetching {self.location}: {e}")
            raise DataSourceError(f"Could not reach {self.location}") from e

        if response.is_error:
            logger.error(
                f"HTTP error fetching match data: {response.status_code} for {self.location}"
            )
            raise DataSourceError(f"HTTP error: {response.status_code}")

        logger.info(f"Downloaded {len(response.text)} characters of match data")
        return response.text

    async def close(self) -> None:
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info(f"Closed HTTP client for {self.location}")
