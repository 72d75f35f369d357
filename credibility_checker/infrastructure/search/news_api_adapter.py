"""NewsAPI implementation of the news search provider."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import ExternalServiceError, ServiceUnavailableError
from ...domain.ports.search_provider import NewsSearchProvider, SearchHit

logger = logging.getLogger(__name__)


class NewsAPIConfig(BaseModel):
    """Configuration for the NewsAPI adapter."""

    api_key: str = Field(default="", description="NewsAPI key")
    base_url: str = Field(default="https://newsapi.org/v2", description="API root")
    page_size: int = Field(default=5, description="Articles requested per query")
    language: str = Field(default="en", description="Article language")
    domains: str = Field(
        default="reuters.com,apnews.com,bbc.com,npr.org",
        description="Comma separated publisher allow list",
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class NewsAPIAdapter(NewsSearchProvider):
    """Searches reputable news publishers through NewsAPI."""

    def __init__(
        self,
        config: Optional[NewsAPIConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            transport: Custom httpx transport
        """
        self._config = config or NewsAPIConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self._config.api_key:
            logger.warning("⚠️ NEWS_API_KEY not set - news search disabled")

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                transport=self._transport,
            )

    async def shutdown(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "newsapi"

    @property
    def is_available(self) -> bool:
        return bool(self._config.api_key)

    def _params(self, query: str) -> Dict[str, Any]:
        return {
            "q": query,
            "apiKey": self._config.api_key,
            "sortBy": "relevancy",
            "pageSize": self._config.page_size,
            "language": self._config.language,
            "domains": self._config.domains,
        }

    async def search(self, query: str) -> List[SearchHit]:
        """Search articles matching the query.

        Raises:
            ServiceUnavailableError: If no API key is configured
            ExternalServiceError: If the request fails
        """
        if not self.is_available:
            raise ServiceUnavailableError(self.provider_name, "API key not configured")
        await self.initialize()

        try:
            response = await self._client.get("/everything", params=self._params(query))
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError(self.provider_name, f"Search failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(self.provider_name, "Invalid JSON response") from e

        hits = []
        for article in data.get("articles") or []:
            if not article.get("url") or not article.get("title"):
                continue
            hits.append(SearchHit(
                url=article["url"],
                title=article["title"],
                published_at=article.get("publishedAt"),
                author=article.get("author"),
                description=article.get("description"),
            ))
        logger.info(f"📰 NewsAPI returned {len(hits)} articles for '{query}'")
        return hits
