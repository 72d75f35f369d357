"""Domain models produced by the generative reasoning provider."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .source import SourceStance, SourceType
from .verification import RiskLevel

REASONING_CATEGORIES = frozenset({"health", "science", "politics", "conspiracy", "general"})


class ReasoningAnalysis(BaseModel):
    """Structured claim analysis from a generative model."""

    is_factual: bool
    credibility_score: float = Field(..., ge=0.0, le=1.0)
    risk_level: RiskLevel
    category: str = "general"
    reasoning: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    suggested_sources: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @classmethod
    def fallback(cls, reason: str = "Generative analysis unavailable") -> "ReasoningAnalysis":
        """Neutral, low-confidence analysis used when a response cannot be trusted."""
        return cls(
            is_factual=False,
            credibility_score=0.5,
            risk_level=RiskLevel.MEDIUM,
            category="general",
            reasoning=reason,
            confidence=0.1,
            suggested_sources=[],
        )


class SuggestedSource(BaseModel):
    """A source candidate proposed by the reasoning provider."""

    url: str
    title: str = "Untitled Source"
    domain: Optional[str] = None
    source_type: SourceType = SourceType.REFERENCE
    reliability: float = 0.85
    relevance_score: float = 0.9
    publish_date: Optional[str] = None
    author: Optional[str] = None
    excerpt: Optional[str] = None
    fact_check_result: SourceStance = SourceStance.NEUTRAL
