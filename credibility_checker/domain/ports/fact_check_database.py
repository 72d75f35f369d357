"""Fact-check database provider interface."""

from typing import Dict, List, Protocol

from ..models.database import DatabaseReview


class FactCheckDatabaseProvider(Protocol):
    """Protocol for structured fact-check databases."""

    async def initialize(self) -> None:
        """Prepare network resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def reliability(self) -> float:
        """Static trust score of the database."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is configured and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...

    async def search(self, query: str) -> List[DatabaseReview]:
        """Search published reviews of a claim.

        Raises:
            RateLimitExceededError: If the provider quota is exhausted
            ExternalServiceError: If the request fails
        """
        ...

    async def check_health(self) -> bool:
        """Return whether the database answers a test query."""
        ...

    async def shutdown(self) -> None:
        """Release network resources."""
        ...
