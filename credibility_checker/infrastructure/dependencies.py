"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from ..domain.services.analysis_orchestrator import AnalysisOrchestrator
from ..domain.services.claim_extraction_service import ClaimExtractionService
from ..domain.services.fact_check_database_service import FactCheckDatabaseService
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.language_service import LanguageNormalizationService
from ..domain.services.rate_limiter import RateLimiter
from ..domain.services.source_generation_service import SourceGenerationService
from .ai.factory import AIProviderFactory
from .config import AppConfig
from .fact_check_db.factory import FactCheckDatabaseFactory
from .search.link_prober import HttpLinkProber
from .search.news_api_adapter import NewsAPIAdapter

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize service container.

        Args:
            config: Application configuration, read from the environment when omitted
        """
        self._config = config or AppConfig.from_env()
        self._services: Dict[str, Any] = {}
        self._ai_factory = AIProviderFactory()
        self._db_factory = FactCheckDatabaseFactory()
        self._lock = asyncio.Lock()

    @property
    def config(self) -> AppConfig:
        return self._config

    async def _setup_providers(self) -> Dict[str, Any]:
        """Create and initialize every external adapter."""
        logger.info("🤖 Setting up AI providers...")
        huggingface = await self._ai_factory.create_provider("huggingface", config=self._config.huggingface)

        reasoning = None
        try:
            reasoning = await self._ai_factory.create_provider("openai", config=self._config.openai)
            logger.info("✅ Reasoning provider ready" if reasoning.is_available else "🎭 Reasoning provider disabled")
        except Exception as e:
            logger.warning(f"⚠️ Failed to set up reasoning provider: {e}")

        logger.info("🗄️ Setting up fact-check databases...")
        databases = []
        try:
            databases.append(await self._db_factory.create_provider(
                "google_fact_check", config=self._config.google_fact_check,
            ))
        except Exception as e:
            logger.warning(f"⚠️ Failed to set up fact-check database: {e}")

        news = NewsAPIAdapter(config=self._config.news_api)
        prober = HttpLinkProber(config=self._config.link_prober)
        await news.initialize()
        await prober.initialize()

        return {
            "huggingface": huggingface,
            "reasoning": reasoning,
            "databases": databases,
            "news": news,
            "link_prober": prober,
        }

    async def _setup_services(self) -> None:
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")
        providers = await self._setup_providers()
        huggingface = providers["huggingface"]
        reasoning = providers["reasoning"]

        language_service = LanguageNormalizationService(
            translator=huggingface,
            rate_limiter=RateLimiter(1, self._config.translation_interval),
        )
        claim_extraction_service = ClaimExtractionService(
            classifier=huggingface,
            question_answerer=huggingface,
            rate_limiter=RateLimiter(1, self._config.extraction_interval),
        )
        source_generation_service = SourceGenerationService(
            link_prober=providers["link_prober"],
            news_provider=providers["news"],
            reasoning_provider=reasoning,
            rate_limiter=RateLimiter(1, self._config.probe_interval),
        )
        fact_checking_service = FactCheckingService(
            classifier=huggingface,
            source_generator=source_generation_service,
        )
        database_service = FactCheckDatabaseService(providers["databases"])
        orchestrator = AnalysisOrchestrator(
            claim_extractor=claim_extraction_service,
            source_generator=source_generation_service,
            fact_checker=fact_checking_service,
            language_service=language_service,
            database_service=database_service,
            reasoning_provider=reasoning,
        )

        self._services = {
            "link_prober": providers["link_prober"],
            "news": providers["news"],
            "language_service": language_service,
            "claim_extraction_service": claim_extraction_service,
            "source_generation_service": source_generation_service,
            "fact_checking_service": fact_checking_service,
            "fact_check_database_service": database_service,
            "analysis_orchestrator": orchestrator,
        }
        logger.info("✅ Service container setup completed")

    async def _ensure_services(self) -> None:
        async with self._lock:
            if not self._services:
                await self._setup_services()

    async def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        await self._ensure_services()
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    async def get_analysis_orchestrator(self) -> AnalysisOrchestrator:
        return await self.get("analysis_orchestrator")

    async def get_claim_extraction_service(self) -> ClaimExtractionService:
        return await self.get("claim_extraction_service")

    async def get_source_generation_service(self) -> SourceGenerationService:
        return await self.get("source_generation_service")

    async def get_fact_checking_service(self) -> FactCheckingService:
        return await self.get("fact_checking_service")

    async def shutdown(self) -> None:
        """Release every network resource."""
        if not self._services:
            return
        await self._ai_factory.shutdown()
        await self._db_factory.shutdown_all()
        await self._services["news"].shutdown()
        await self._services["link_prober"].shutdown()
        self._services = {}
        logger.info("👋 Service container shut down")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
async def get_analysis_orchestrator() -> AnalysisOrchestrator:
    """FastAPI dependency for the analysis orchestrator."""
    return await get_service_container().get_analysis_orchestrator()


async def get_claim_extraction_service() -> ClaimExtractionService:
    """FastAPI dependency for claim extraction."""
    return await get_service_container().get_claim_extraction_service()


async def get_source_generation_service() -> SourceGenerationService:
    """FastAPI dependency for source generation."""
    return await get_service_container().get_source_generation_service()


async def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for credibility scoring."""
    return await get_service_container().get_fact_checking_service()
