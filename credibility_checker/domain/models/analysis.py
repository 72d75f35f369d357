"""Domain models for a complete content analysis run."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .claim import Claim
from .database import DatabaseSearchResult
from .fact_check_result import FactCheckResult
from .reasoning import ReasoningAnalysis
from .source import Source
from .verification import RiskLevel, VerificationStatus


class EnhancedClaim(Claim):
    """A claim merged with every verification signal gathered for it."""

    fact_check_result: FactCheckResult
    database_results: List[DatabaseSearchResult] = Field(default_factory=list)
    reasoning_analysis: Optional[ReasoningAnalysis] = None
    final_verdict: VerificationStatus
    harm_potential: RiskLevel


class LanguageInfo(BaseModel):
    """Language detection outcome for the analyzed text."""

    detected: str
    was_translated: bool = False
    confidence: Optional[float] = None


class OverallAssessment(BaseModel):
    """Cross-claim verdict."""

    credibility_score: float = Field(..., ge=0.0, le=1.0)
    risk_level: RiskLevel
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str


class AnalysisMetadata(BaseModel):
    """Bookkeeping about the run."""

    processing_time: float = Field(..., description="Elapsed milliseconds")
    services_used: List[str] = Field(default_factory=list)
    claims_found: int = 0
    sources_verified: int = 0
    databases_searched: int = 0


class ComprehensiveAnalysisResult(BaseModel):
    """Complete output of the analysis pipeline."""

    analysis_id: str
    original_text: str
    processed_text: str
    language: LanguageInfo
    claims: List[EnhancedClaim] = Field(default_factory=list)
    sources: List[Source] = Field(default_factory=list)
    overall_assessment: OverallAssessment
    metadata: AnalysisMetadata


class AnalysisOptions(BaseModel):
    """Options accepted by the orchestrator."""

    max_claims: int = Field(default=10, ge=1, le=50)
    min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    include_opinions: bool = False
    search_databases: bool = True
    verify_urls: bool = True
    translate_to_english: bool = True
    deep_analysis: bool = True


class NormalizedText(BaseModel):
    """Text prepared for analysis, possibly translated to English."""

    processed_text: str
    original_language: str
    was_translated: bool = False
    translation_confidence: Optional[float] = None


class HealthStatus(str, Enum):
    """Coarse health states."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ServiceHealth(BaseModel):
    """Health of one pipeline collaborator."""

    name: str
    status: HealthStatus
    details: Dict[str, Any] = Field(default_factory=dict)


class HealthReport(BaseModel):
    """Aggregated health of the pipeline."""

    status: HealthStatus
    services: List[ServiceHealth] = Field(default_factory=list)
    healthy_services: int = 0
    total_services: int = 0
