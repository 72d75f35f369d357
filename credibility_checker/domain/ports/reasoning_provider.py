"""Protocol for generative reasoning providers."""

from typing import List, Protocol

from ..models.reasoning import ReasoningAnalysis, SuggestedSource


class ReasoningProvider(Protocol):
    """Protocol defining the interface for generative reasoning."""

    @property
    def is_available(self) -> bool:
        """Whether the provider is configured and usable."""
        ...

    async def extract_topics(self, text: str) -> List[str]:
        """Extract 5-10 search topics from text."""
        ...

    async def analyze_claim(self, claim: str) -> ReasoningAnalysis:
        """Produce a structured analysis of one claim."""
        ...

    async def suggest_sources(self, text: str, count: int) -> List[SuggestedSource]:
        """Suggest evidence sources relevant to text."""
        ...

    async def check_health(self) -> bool:
        """Return whether the model answers a minimal request."""
        ...
