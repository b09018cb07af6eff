"""
Wikipedia page lookup via the MediaWiki opensearch API.

One request per lookup: the best-matching article title and its URL.

Example:
    >>> async with WikipediaService(settings.wikipedia) as wiki:
    ...     page = await wiki.search_for_page("Cats")
    ...     page.title, page.url
    ('Cat', 'https://en.wikipedia.org/wiki/Cat')
"""

from __future__ import annotations

import aiohttp
from pydantic import BaseModel

from simpbot.config.logging import get_logger
from simpbot.config.settings import WikipediaSettings
from simpbot.errors import SimpBotError

logger = get_logger(__name__)


class WikipediaError(SimpBotError):
    """The MediaWiki API could not be reached or returned an unusable response."""


class WikiPage(BaseModel):
    """A Wikipedia article reference."""

    title: str
    url: str


class WikipediaService:
    """
    Async client for Wikipedia article search.

    The HTTP session is created in initialize() and closed in shutdown();
    use it as an async context manager.

    Args:
        settings: API endpoint, timeout and User-Agent
    """

    def __init__(self, settings: WikipediaSettings):
        self.settings = settings
        self._session: aiohttp.ClientSession | None = None

    async def initialize(self) -> None:
        if self._session is not None:
            return
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
            headers={"User-Agent": self.settings.user_agent},
        )
        logger.info(f"Wikipedia service ready ({self.settings.api_url})")

    async def shutdown(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> WikipediaService:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.shutdown()
        return False

    async def search_for_page(self, query: str) -> WikiPage | None:
        """
        Find the article that best matches ``query``.

        Returns:
            The top match, or None if Wikipedia has no matching article

        Raises:
            RuntimeError: If the service is not initialized
            WikipediaError: On network failure or a malformed response
        """
        if self._session is None:
            raise RuntimeError(
                "Wikipedia service not initialized. "
                "Use 'async with WikipediaService(...)' or call await service.initialize()"
            )

        params = {
            "action": "opensearch",
            "search": query,
            "limit": "1",
            "namespace": "0",
            "format": "json",
        }
        logger.debug(f"Searching Wikipedia for {query!r}")

        try:
            async with self._session.get(self.settings.api_url, params=params) as response:
                if response.status != 200:
                    raise WikipediaError(f"Wikipedia returned HTTP {response.status}")
                payload = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            logger.warning(f"Wikipedia request failed for {query!r}: {e}")
            raise WikipediaError(f"Network error: {e}") from e

        # opensearch: [query, [titles], [descriptions], [urls]]
        try:
            titles, urls = payload[1], payload[3]
        except (IndexError, KeyError, TypeError) as e:
            raise WikipediaError(f"Unexpected response shape: {payload!r}") from e

        if not titles or not urls:
            return None
        return WikiPage(title=titles[0], url=urls[0])
