from abc import ABC, abstractmethod


class DataSourceError(Exception):
    """Raised when match data cannot be obtained from its source."""

    pass


class AuthenticationError(DataSourceError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class RateLimitError(DataSourceError):
    """Exception raised for rate limit errors (429)."""

    pass


class BaseSource(ABC):
    """Abstract base class for match data sources."""

    location: str = ""

    @abstractmethod
    async def fetch_text(self) -> str:
        """Fetch the raw CSV text of the match sheet.

        Raises:
            DataSourceError: If the source is unavailable.
        """
        pass

    async def close(self) -> None:
        """Releases any resources held by the source."""
        return None
