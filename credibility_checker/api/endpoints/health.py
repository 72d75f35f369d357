"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ...domain.models.analysis import HealthReport
from ...domain.services.analysis_orchestrator import AnalysisOrchestrator
from ...infrastructure.dependencies import get_analysis_orchestrator

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthReport)
async def health_check(
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
) -> HealthReport:
    """Check the health of all pipeline components.

    Returns:
        Health of claim extraction, scoring, reasoning and the fact-check databases
    """
    return await orchestrator.get_health_status()
