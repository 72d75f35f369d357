"""Service coordinating the full claim credibility pipeline."""

import asyncio
import logging
import time
import uuid
from typing import Callable, List, Optional

from ..errors import InputValidationError, PipelineError
from ..models.analysis import (
    AnalysisMetadata,
    AnalysisOptions,
    ComprehensiveAnalysisResult,
    EnhancedClaim,
    HealthReport,
    HealthStatus,
    LanguageInfo,
    ServiceHealth,
)
from ..models.claim import Claim, ClaimExtractionOptions
from ..models.database import DatabaseSearchResult
from ..models.fact_check_result import FactCheckingOptions
from ..models.reasoning import ReasoningAnalysis
from ..models.source import Source, SourceGenerationOptions, SourceVerificationStatus
from ..ports.reasoning_provider import ReasoningProvider
from .claim_extraction_service import ClaimExtractionService
from .fact_check_database_service import FactCheckDatabaseService
from .fact_checking_service import FactCheckingService
from .language_service import LanguageNormalizationService
from .source_generation_service import SourceGenerationService
from .text_analysis import detect_language
from .verdict_resolution import (
    aggregate_assessment,
    database_signal,
    no_claims_assessment,
    reasoning_signal,
    resolve_harm_potential,
    resolve_verdict,
    scorer_signal,
)

logger = logging.getLogger(__name__)

SHARED_POOL_SIZE = 5
MIN_SOURCE_RELIABILITY = 0.7


def new_analysis_id() -> str:
    """Default analysis identifier factory."""
    return f"analysis_{uuid.uuid4().hex}"


class AnalysisOrchestrator:
    """Runs extraction, evidence gathering, scoring and aggregation for a text."""

    def __init__(
        self,
        claim_extractor: ClaimExtractionService,
        source_generator: SourceGenerationService,
        fact_checker: FactCheckingService,
        language_service: Optional[LanguageNormalizationService] = None,
        database_service: Optional[FactCheckDatabaseService] = None,
        reasoning_provider: Optional[ReasoningProvider] = None,
        id_factory: Callable[[], str] = new_analysis_id,
    ):
        """Initialize the orchestrator.

        Args:
            claim_extractor: Claim extraction stage
            source_generator: Evidence pool stage
            fact_checker: Per-claim credibility scorer
            language_service: Translation to English, optional
            database_service: Fact-check database search, optional
            reasoning_provider: Generative claim analysis, optional
            id_factory: Produces analysis identifiers
        """
        self._extractor = claim_extractor
        self._sources = source_generator
        self._fact_checker = fact_checker
        self._language = language_service
        self._databases = database_service
        self._reasoning = reasoning_provider
        self._new_id = id_factory
        logger.info("🔧 AnalysisOrchestrator initialized")

    @property
    def reasoning_enabled(self) -> bool:
        return self._reasoning is not None and self._reasoning.is_available

    @property
    def databases_enabled(self) -> bool:
        return self._databases is not None and self._databases.is_available

    async def analyze_content(
        self,
        text: str,
        options: Optional[AnalysisOptions] = None,
    ) -> ComprehensiveAnalysisResult:
        """Run the complete analysis pipeline over text.

        Args:
            text: Text to analyze
            options: Analysis options

        Returns:
            The complete analysis result

        Raises:
            InputValidationError: If the text is rejected
            PipelineError: If any stage fails
        """
        options = options or AnalysisOptions()
        analysis_id = self._new_id()
        started = time.perf_counter()
        services_used: List[str] = []
        stage = "language_normalization"

        logger.info(f"🚀 Starting analysis {analysis_id} for {len(text)} characters")

        try:
            processed_text, language = await self._normalize(text, options, services_used)

            stage = "claim_extraction"
            services_used.append("claim_extraction")
            extraction = await self._extractor.extract_claims(
                processed_text,
                ClaimExtractionOptions(
                    max_claims=options.max_claims,
                    min_confidence=options.min_confidence,
                    include_opinions=options.include_opinions,
                ),
            )

            if not extraction.claims:
                logger.info(f"📭 Analysis {analysis_id}: no claims found")
                return ComprehensiveAnalysisResult(
                    analysis_id=analysis_id,
                    original_text=text,
                    processed_text=processed_text,
                    language=language,
                    claims=[],
                    sources=[],
                    overall_assessment=no_claims_assessment(),
                    metadata=AnalysisMetadata(
                        processing_time=(time.perf_counter() - started) * 1000,
                        services_used=services_used,
                    ),
                )

            stage = "source_generation"
            services_used.append("source_generation")
            sources = await self._sources.generate_sources(
                processed_text,
                SourceGenerationOptions(
                    max_sources=SHARED_POOL_SIZE,
                    min_reliability=MIN_SOURCE_RELIABILITY,
                    verify_urls=options.verify_urls,
                ),
            )

            stage = "claim_analysis"
            claims = []
            databases_searched = 0
            for index, claim in enumerate(extraction.claims, start=1):
                logger.info(f"🔍 Analyzing claim {index}/{len(extraction.claims)}: {claim.text[:50]}...")
                enhanced, searched = await self._analyze_claim(claim, sources, options, services_used)
                databases_searched = max(databases_searched, searched)
                claims.append(enhanced)

            stage = "aggregation"
            assessment = aggregate_assessment(claims)
        except (InputValidationError, PipelineError):
            raise
        except Exception as e:
            logger.error(f"❌ Analysis {analysis_id} failed during {stage}: {e}")
            raise PipelineError(str(e), stage=stage) from e

        elapsed = (time.perf_counter() - started) * 1000
        logger.info(f"✅ Analysis {analysis_id} completed in {elapsed:.0f}ms")
        return ComprehensiveAnalysisResult(
            analysis_id=analysis_id,
            original_text=text,
            processed_text=processed_text,
            language=language,
            claims=claims,
            sources=sources,
            overall_assessment=assessment,
            metadata=AnalysisMetadata(
                processing_time=elapsed,
                services_used=services_used,
                claims_found=len(claims),
                sources_verified=sum(
                    1 for source in sources
                    if source.verification_status == SourceVerificationStatus.VERIFIED
                ),
                databases_searched=databases_searched,
            ),
        )

    async def _normalize(self, text: str, options: AnalysisOptions, services_used: List[str]):
        if options.translate_to_english and self._language is not None:
            services_used.append("translation")
            normalized = await self._language.prepare_text(text)
            return normalized.processed_text, LanguageInfo(
                detected=normalized.original_language,
                was_translated=normalized.was_translated,
                confidence=normalized.translation_confidence,
            )
        detected, _ = detect_language(text)
        return text, LanguageInfo(detected=detected)

    async def _analyze_claim(
        self,
        claim: Claim,
        sources: List[Source],
        options: AnalysisOptions,
        services_used: List[str],
    ):
        self._mark(services_used, "fact_checking")
        fact_check = await self._fact_checker.fact_check_claim(
            claim,
            FactCheckingOptions(min_source_reliability=MIN_SOURCE_RELIABILITY),
            shared_sources=sources,
        )

        database_results: List[DatabaseSearchResult] = []
        searched = 0
        if options.search_databases and self.databases_enabled:
            self._mark(services_used, "database_search")
            searched = len(self._databases.available_providers)
            database_results = await self._search_databases(claim.text)

        reasoning: Optional[ReasoningAnalysis] = None
        if options.deep_analysis and self.reasoning_enabled:
            self._mark(services_used, "reasoning_analysis")
            reasoning = await self._analyze_with_reasoning(claim.text)

        verdict = resolve_verdict([
            scorer_signal(fact_check),
            database_signal(database_results),
            reasoning_signal(reasoning),
        ])
        harm = resolve_harm_potential(
            claim.category,
            fact_check.credibility_score,
            fact_check.credibility_assessment.risk_level,
            reasoning.risk_level if reasoning is not None else None,
        )

        enhanced = EnhancedClaim(
            **claim.model_dump(),
            fact_check_result=fact_check,
            database_results=database_results,
            reasoning_analysis=reasoning,
            final_verdict=verdict,
            harm_potential=harm,
        )
        return enhanced, searched

    async def _search_databases(self, claim_text: str) -> List[DatabaseSearchResult]:
        try:
            results = await self._databases.search_fact_check_databases(claim_text)
        except Exception as e:
            logger.warning(f"⚠️ Database search failed: {e}")
            return []
        return [result for result in results if result.success]

    async def _analyze_with_reasoning(self, claim_text: str) -> Optional[ReasoningAnalysis]:
        try:
            return await self._reasoning.analyze_claim(claim_text)
        except Exception as e:
            logger.warning(f"⚠️ Reasoning analysis failed: {e}")
            return None

    @staticmethod
    def _mark(services_used: List[str], name: str) -> None:
        if name not in services_used:
            services_used.append(name)

    async def get_health_status(self) -> HealthReport:
        """Check every collaborator in parallel."""
        checks = [
            ("claim_extraction", self._extractor.get_health_status()),
            ("fact_checking", self._fact_checker.get_health_status()),
            ("reasoning", self._reasoning_health()),
            ("fact_check_databases", self._database_health()),
        ]
        outcomes = await asyncio.gather(*(check for _, check in checks), return_exceptions=True)

        services = []
        for (name, _), outcome in zip(checks, outcomes):
            if isinstance(outcome, BaseException):
                services.append(ServiceHealth(
                    name=name, status=HealthStatus.UNHEALTHY, details={"error": str(outcome)},
                ))
            else:
                services.append(outcome)

        healthy = sum(1 for service in services if service.status == HealthStatus.HEALTHY)
        if healthy == len(services):
            status = HealthStatus.HEALTHY
        elif healthy > 0:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return HealthReport(
            status=status,
            services=services,
            healthy_services=healthy,
            total_services=len(services),
        )

    async def _reasoning_health(self) -> ServiceHealth:
        if not self.reasoning_enabled:
            return ServiceHealth(name="reasoning", status=HealthStatus.UNHEALTHY, details={"configured": False})
        ok = await self._reasoning.check_health()
        return ServiceHealth(
            name="reasoning",
            status=HealthStatus.HEALTHY if ok else HealthStatus.UNHEALTHY,
            details={"configured": True},
        )

    async def _database_health(self) -> ServiceHealth:
        if self._databases is None:
            return ServiceHealth(
                name="fact_check_databases", status=HealthStatus.UNHEALTHY, details={"configured": False},
            )
        return await self._databases.get_health_status()
