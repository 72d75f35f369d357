"""Google Fact Check Tools implementation of the fact-check database provider."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import ExternalServiceError, RateLimitExceededError, ServiceUnavailableError
from ...domain.models.database import DatabaseReview
from ...domain.ports.fact_check_database import FactCheckDatabaseProvider
from ...domain.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class GoogleFactCheckConfig(BaseModel):
    """Configuration for the Google ClaimReview adapter."""

    api_key: str = Field(default="", description="Google Fact Check Tools API key")
    base_url: str = Field(default="https://factchecktools.googleapis.com", description="API root")
    search_endpoint: str = Field(default="/v1alpha1/claims:search", description="Claim search path")
    language_code: str = Field(default="en", description="Review language")
    reliability: float = Field(default=0.90, description="Static trust score of the database")
    rate_limit: int = Field(default=100, description="Requests allowed per window")
    rate_window: float = Field(default=60.0, description="Rate limit window in seconds")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class GoogleFactCheckAdapter(FactCheckDatabaseProvider):
    """Looks up published ClaimReview entries for a claim."""

    def __init__(
        self,
        config: Optional[GoogleFactCheckConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        provider_name: str = "ClaimReview (Google)",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            rate_limiter: Quota tracker, one window of ``rate_limit`` requests by default
            transport: Custom httpx transport
            provider_name: Name reported in search results
        """
        self._config = config or GoogleFactCheckConfig()
        self._limiter = rate_limiter or RateLimiter(self._config.rate_limit, self._config.rate_window)
        self._transport = transport
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        if not self._config.api_key:
            logger.warning("⚠️ GOOGLE_FACTCHECK_API_KEY not set - ClaimReview search disabled")

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                transport=self._transport,
            )

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def reliability(self) -> float:
        return self._config.reliability

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._limiter

    @property
    def is_available(self) -> bool:
        return bool(self._config.api_key)

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {
            "claim_search": True,
            "publisher_ratings": True,
            "rate_limited": True,
        }

    async def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        await self.initialize()
        try:
            response = await self._client.get(self._config.search_endpoint, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError(self._name, f"Search failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(self._name, "Invalid JSON response") from e

    async def search(self, query: str) -> List[DatabaseReview]:
        """Search reviews of a claim.

        Raises:
            ServiceUnavailableError: If no API key is configured
            RateLimitExceededError: If the request quota is exhausted
            ExternalServiceError: If the request fails
        """
        if not self.is_available:
            raise ServiceUnavailableError(self._name, "API key not configured")
        if not self._limiter.try_acquire():
            raise RateLimitExceededError(self._name, self._limiter.retry_after())

        data = await self._get({
            "query": query,
            "key": self._config.api_key,
            "languageCode": self._config.language_code,
        })

        reviews = []
        for claim in data.get("claims") or []:
            for review in claim.get("claimReview") or []:
                reviews.append(DatabaseReview(
                    claim_text=claim.get("text"),
                    textual_rating=review.get("textualRating") or "",
                    publisher=(review.get("publisher") or {}).get("name") or "Unknown",
                    url=review.get("url") or "",
                    review_date=review.get("reviewDate"),
                    claimant=claim.get("claimant"),
                ))
        logger.info(f"🗄️ {self._name} returned {len(reviews)} reviews")
        return reviews

    async def check_health(self) -> bool:
        """Run a one-result query against the API."""
        if not self.is_available or not self._limiter.try_acquire():
            return False
        try:
            await self._get({
                "query": "health check",
                "key": self._config.api_key,
                "languageCode": self._config.language_code,
                "pageSize": 1,
            })
            return True
        except ExternalServiceError as e:
            logger.warning(f"⚠️ {self._name} health check failed: {e}")
            return False
