"""Domain model for evidence sources."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Broad kind of publisher behind a source."""

    FACT_CHECK = "fact_check"
    NEWS = "news"
    ACADEMIC = "academic"
    GOVERNMENT = "government"
    REFERENCE = "reference"


class SourceStance(str, Enum):
    """What a source says about the claims under analysis."""

    SUPPORTS = "supports"
    CONTRADICTS = "contradicts"
    NEUTRAL = "neutral"
    INSUFFICIENT_EVIDENCE = "insufficient_evidence"


class SourceVerificationStatus(str, Enum):
    """Liveness state of a source URL."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    FAILED = "failed"


class Source(BaseModel):
    """A URL-backed piece of evidence."""

    url: str = Field(..., description="Source URL")
    title: str = Field(..., description="Title of the page or search")
    domain: str = Field(..., description="Publisher domain without www prefix")
    reliability: float = Field(..., ge=0.0, le=1.0, description="Static per-domain trust score")
    publish_date: Optional[str] = Field(None, description="ISO publication date when known")
    author: Optional[str] = Field(None, description="Author when known")
    relevance_score: float = Field(default=0.5, ge=0.0, le=1.0, description="Relevance to the analyzed text")
    fact_check_result: SourceStance = Field(default=SourceStance.NEUTRAL, description="Stance toward the claims")
    excerpt: Optional[str] = Field(None, description="Short description of the content")
    source_type: SourceType = Field(default=SourceType.REFERENCE, description="Publisher kind")
    verification_status: SourceVerificationStatus = Field(
        default=SourceVerificationStatus.UNVERIFIED,
        description="Result of the liveness probe",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def rank_score(self) -> float:
        """Ranking key used when selecting the best sources."""
        return self.reliability * self.relevance_score

    def with_status(self, status: SourceVerificationStatus) -> "Source":
        """Return a copy carrying a new verification status."""
        return self.model_copy(update={"verification_status": status})


class SourceGenerationOptions(BaseModel):
    """Tuning knobs for evidence gathering."""

    max_sources: int = Field(default=3, ge=1, description="Maximum sources returned")
    min_reliability: float = Field(default=0.7, ge=0.0, le=1.0, description="Minimum domain reliability")
    verify_urls: bool = Field(default=True, description="Probe candidate URLs before ranking")
    max_topics: int = Field(default=3, ge=1, description="Topics searched on curated fact-check sites")
