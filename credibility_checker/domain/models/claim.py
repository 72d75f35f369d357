"""Domain model for extracted claims."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ClaimCategory(str, Enum):
    """Kinds of statements the extractor distinguishes."""

    FACTUAL = "factual"
    OPINION = "opinion"
    PREDICTION = "prediction"
    STATISTICAL = "statistical"
    UNKNOWN = "unknown"


class TextPosition(BaseModel):
    """Character offsets of a claim in the analyzed text."""

    start: int = Field(..., ge=0, description="Offset of the first character")
    end: int = Field(..., ge=0, description="Offset one past the last character")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class Claim(BaseModel):
    """Represents a candidate statement extracted from source text."""

    id: str = Field(..., description="Identifier unique within one analysis run")
    text: str = Field(..., description="The claim text")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Classifier confidence")
    category: ClaimCategory = Field(default=ClaimCategory.UNKNOWN, description="Statement kind")
    context: str = Field(default="", description="Surrounding text window")
    position: TextPosition = Field(
        default_factory=lambda: TextPosition(start=0, end=0),
        description="Offsets into the analyzed text",
    )
    keywords: List[str] = Field(default_factory=list, description="Distinct keywords in order of appearance")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        json_schema_extra = {
            "example": {
                "id": "claim_5f1c2a9e0b7d",
                "text": "The Earth is approximately 4.54 billion years old",
                "confidence": 0.87,
                "category": "factual",
                "context": "Geologists agree. The Earth is approximately 4.54 billion years old.",
                "position": {"start": 18, "end": 67},
                "keywords": ["earth", "approximately", "billion", "years"],
            }
        }


class ClaimExtractionOptions(BaseModel):
    """Tuning knobs for claim extraction."""

    max_claims: int = Field(default=20, ge=1, description="Maximum claims returned")
    min_confidence: float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum classifier score")
    include_opinions: bool = Field(default=False, description="Keep sentences classified as opinion")
    context_window: int = Field(default=100, ge=0, description="Context characters on each side")
    min_claim_length: int = Field(default=20, ge=0, description="Shortest sentence sent to the classifier")


class ClaimExtractionResult(BaseModel):
    """Output of one claim extraction call."""

    claims: List[Claim]
    total_claims: int
    processing_time: float = Field(..., description="Elapsed milliseconds")
    text_length: int
    language: str
