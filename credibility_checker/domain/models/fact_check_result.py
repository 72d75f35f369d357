"""Domain model for per-claim fact checking results."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .source import Source
from .verification import RiskLevel, VerificationStatus


class CredibilityFactors(BaseModel):
    """The five weighted inputs of a credibility score."""

    source_reliability: float = Field(..., ge=0.0, le=1.0)
    evidence_strength: float = Field(..., ge=0.0, le=1.0)
    consensus_level: float = Field(..., ge=0.0, le=1.0)
    recency: float = Field(..., ge=0.0, le=1.0)
    author_credibility: float = Field(..., ge=0.0, le=1.0)

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @classmethod
    def neutral(cls) -> "CredibilityFactors":
        """Factors used when no assessment could be made."""
        return cls(
            source_reliability=0.5,
            evidence_strength=0.5,
            consensus_level=0.5,
            recency=0.5,
            author_credibility=0.5,
        )


class CredibilityAssessment(BaseModel):
    """Multi-factor credibility estimate for one claim."""

    overall_score: float = Field(..., ge=0.0, le=1.0, description="Weighted credibility")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence in the assessment")
    factors: CredibilityFactors
    reasoning: str
    risk_level: RiskLevel
    ai_assessment: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Classifier cross-check; reported in reasoning, not weighted",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True


class FactCheckResult(BaseModel):
    """Result of fact checking one claim."""

    claim_id: str
    original_claim: str
    credibility_score: float = Field(..., ge=0.0, le=1.0)
    credibility_assessment: CredibilityAssessment
    sources: List[Source] = Field(default_factory=list)
    verification_status: VerificationStatus
    processing_time: float = Field(..., description="Elapsed milliseconds")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class FactCheckingOptions(BaseModel):
    """Tuning knobs for the credibility scorer."""

    max_sources: int = Field(default=5, ge=1, description="Sources gathered when no shared pool is given")
    min_source_reliability: float = Field(default=0.6, ge=0.0, le=1.0)
