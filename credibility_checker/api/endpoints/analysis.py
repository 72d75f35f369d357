"""Credibility analysis API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import InputValidationError, PipelineError
from ...domain.models.analysis import AnalysisOptions, ComprehensiveAnalysisResult
from ...domain.models.claim import Claim, ClaimExtractionOptions, ClaimExtractionResult
from ...domain.models.fact_check_result import FactCheckingOptions, FactCheckResult
from ...domain.models.source import Source, SourceGenerationOptions
from ...domain.services.analysis_orchestrator import AnalysisOrchestrator
from ...domain.services.claim_extraction_service import ClaimExtractionService, new_claim_id
from ...domain.services.fact_checking_service import FactCheckingService
from ...domain.services.source_generation_service import SourceGenerationService
from ...domain.services.text_analysis import extract_keywords
from ...infrastructure.dependencies import (
    get_analysis_orchestrator,
    get_claim_extraction_service,
    get_fact_checking_service,
    get_source_generation_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


class TextAnalysisRequest(BaseModel):
    """Request model for a complete analysis run."""

    text: str = Field(..., description="Text to analyze")
    options: AnalysisOptions = Field(default_factory=AnalysisOptions)


class ClaimExtractionRequest(BaseModel):
    """Request model for claim extraction."""

    text: str = Field(..., description="Text to extract claims from")
    options: ClaimExtractionOptions = Field(default_factory=ClaimExtractionOptions)


class SourceGenerationRequest(BaseModel):
    """Request model for source generation."""

    text: str = Field(..., description="Text to find evidence for")
    options: SourceGenerationOptions = Field(default_factory=SourceGenerationOptions)


class SourceGenerationResponse(BaseModel):
    """Response model for source generation."""

    sources: List[Source]
    total_sources: int


class FactCheckRequest(BaseModel):
    """Request model for scoring a single claim."""

    claim: str = Field(..., description="Claim text to score")
    options: FactCheckingOptions = Field(default_factory=FactCheckingOptions)


@router.post("/text", response_model=ComprehensiveAnalysisResult)
async def analyze_text(
    request: TextAnalysisRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
) -> ComprehensiveAnalysisResult:
    """Run the complete credibility analysis over text.

    Raises:
        HTTPException: 400 for rejected input, 500 when the pipeline fails
    """
    logger.info(f"📨 Analysis request for text: {request.text[:100]}...")
    try:
        return await orchestrator.analyze_content(request.text, request.options)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PipelineError as e:
        logger.error(f"❌ Analysis failed at stage {e.stage}: {e}")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {e}")
    except Exception as e:
        logger.error(f"❌ Unexpected analysis failure: {e}")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")


@router.post("/claims", response_model=ClaimExtractionResult)
async def extract_claims(
    request: ClaimExtractionRequest,
    extractor: ClaimExtractionService = Depends(get_claim_extraction_service),
) -> ClaimExtractionResult:
    """Extract candidate claims from text."""
    try:
        return await extractor.extract_claims(request.text, request.options)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Claim extraction failed: {e}")
        raise HTTPException(status_code=500, detail=f"Claim extraction failed: {str(e)}")


@router.post("/sources", response_model=SourceGenerationResponse)
async def generate_sources(
    request: SourceGenerationRequest,
    generator: SourceGenerationService = Depends(get_source_generation_service),
) -> SourceGenerationResponse:
    """Find and verify evidence sources for text."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text must not be empty")
    try:
        sources = await generator.generate_sources(request.text, request.options)
    except Exception as e:
        logger.error(f"❌ Source generation failed: {e}")
        raise HTTPException(status_code=500, detail=f"Source generation failed: {str(e)}")
    return SourceGenerationResponse(sources=sources, total_sources=len(sources))


@router.post("/fact-check", response_model=FactCheckResult)
async def fact_check(
    request: FactCheckRequest,
    fact_checker: FactCheckingService = Depends(get_fact_checking_service),
) -> FactCheckResult:
    """Score the credibility of a single claim."""
    text = request.claim.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Claim must not be empty")

    claim = Claim(
        id=new_claim_id(),
        text=text,
        confidence=1.0,
        keywords=extract_keywords(text),
    )
    try:
        return await fact_checker.fact_check_claim(claim, request.options)
    except Exception as e:
        logger.error(f"❌ Fact check failed: {e}")
        raise HTTPException(status_code=500, detail=f"Fact check failed: {str(e)}")
