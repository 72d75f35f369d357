"""HTTP implementation of the link liveness prober."""

import logging
from typing import Optional

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.ports.search_provider import LinkProber

logger = logging.getLogger(__name__)


class LinkProberConfig(BaseModel):
    """Configuration for the HTTP link prober."""

    timeout: float = Field(default=8.0, description="Request timeout in seconds")
    max_redirects: int = Field(default=3, description="Redirects followed per request")
    user_agent: str = Field(
        default="CredibilityChecker/1.0 (Fact-checking bot)",
        description="User agent sent with probes",
    )
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")


def _reachable(status_code: int) -> bool:
    return 200 <= status_code < 400


class HttpLinkProber(LinkProber):
    """Checks URLs with HEAD, falling back to GET, and caches the outcome."""

    def __init__(
        self,
        config: Optional[LinkProberConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the prober.

        Args:
            config: Prober configuration
            transport: Custom httpx transport
        """
        self._config = config or LinkProberConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl,
        )

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=True,
                max_redirects=self._config.max_redirects,
                headers={
                    "User-Agent": self._config.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                },
                transport=self._transport,
            )

    async def shutdown(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def probe(self, url: str) -> int:
        """Return the HTTP status reached for url.

        Tries HEAD first and GET when HEAD fails or is refused.

        Raises:
            httpx.HTTPError: If neither method gets a response
        """
        if url in self._cache:
            return self._cache[url]
        await self.initialize()

        status_code = None
        try:
            response = await self._client.head(url)
            status_code = response.status_code
        except httpx.HTTPError as e:
            logger.debug(f"HEAD failed for {url}: {e}")

        if status_code is None or not _reachable(status_code):
            response = await self._client.get(url)
            status_code = response.status_code

        self._cache[url] = status_code
        return status_code
