"""
HTTP page fetcher.

Retrieves the status page with httpx. Any transport problem or non-success
status is reported as FetchError.
"""
from typing import Optional

import httpx

from townhall_exporter.internal.domain.errors import FetchError
from townhall_exporter.pkg.logger.logger import get_logger


logger = get_logger(__name__)


DEFAULT_TIMEOUT = 10.0


class HttpPageFetcher:
    """
    Page fetcher backed by a shared httpx.AsyncClient.

    Use as an async context manager or call close() when done.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            timeout: Total request timeout in seconds.
            user_agent: User-Agent header sent with every request.
            client: Pre-configured client, mainly for tests.
        """
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> str:
        """
        Fetch a page and return its decoded body.

        Args:
            url: Page URL.

        Returns:
            Response text.

        Raises:
            FetchError: Transport failure or non-2xx response.
        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e

        logger.debug(
            "Page fetched",
            url=url,
            status_code=response.status_code,
            size=len(response.content),
        )
        return response.text

    async def close(self) -> None:
        """Close the underlying client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpPageFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
