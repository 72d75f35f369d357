"""Domain models for structured fact-check database lookups."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class DatabaseVerdict(str, Enum):
    """Normalized verdict vocabulary across fact-check publishers."""

    TRUE = "true"
    FALSE = "false"
    MIXED = "mixed"
    DISPUTED = "disputed"
    UNPROVEN = "unproven"


class DatabaseReview(BaseModel):
    """One raw review as returned by a fact-check database provider."""

    claim_text: Optional[str] = None
    textual_rating: str = ""
    publisher: str = "Unknown"
    url: str = ""
    review_date: Optional[str] = None
    claimant: Optional[str] = None


class DatabaseFactCheck(BaseModel):
    """A normalized review of a claim by a fact-check publisher."""

    claim: str
    verdict: DatabaseVerdict
    confidence: float = Field(..., ge=0.0, le=1.0)
    source: str
    url: str
    date: str
    explanation: str


class DatabaseSearchResult(BaseModel):
    """Outcome of querying one provider."""

    database: str
    results: List[DatabaseFactCheck] = Field(default_factory=list)
    search_time: float = Field(default=0.0, description="Elapsed milliseconds")
    success: bool
    error: Optional[str] = None


class AggregatedFactCheck(BaseModel):
    """Majority view over every successful provider result."""

    overall_verdict: DatabaseVerdict
    confidence: float = Field(..., ge=0.0, le=1.0)
    sources: List[DatabaseFactCheck] = Field(default_factory=list)
    consensus: float = Field(..., ge=0.0, le=1.0)
