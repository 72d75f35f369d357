"""Protocols for evidence discovery on the web."""

from typing import List, Optional, Protocol

from pydantic import BaseModel, Field


class SearchHit(BaseModel):
    """One article returned by a news search."""

    url: str = Field(..., description="Article URL")
    title: str = Field(..., description="Article title")
    published_at: Optional[str] = Field(None, description="ISO publication timestamp")
    author: Optional[str] = Field(None, description="Article author")
    description: Optional[str] = Field(None, description="Short summary")


class NewsSearchProvider(Protocol):
    """Protocol for news search APIs."""

    @property
    def is_available(self) -> bool:
        """Whether the provider is configured."""
        ...

    async def search(self, query: str) -> List[SearchHit]:
        """Search news articles matching the query."""
        ...


class LinkProber(Protocol):
    """Protocol for URL liveness checks."""

    async def probe(self, url: str) -> int:
        """Return the HTTP status reached for url."""
        ...
