"""Service for searching structured fact-check databases."""

import asyncio
import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from ..models.analysis import HealthStatus, ServiceHealth
from ..models.database import (
    AggregatedFactCheck,
    DatabaseFactCheck,
    DatabaseReview,
    DatabaseSearchResult,
    DatabaseVerdict,
)
from ..ports.fact_check_database import FactCheckDatabaseProvider

logger = logging.getLogger(__name__)

# Checked in order; false-family first so negated ratings like "inaccurate" or
# "not true" are not read as true.
_VERDICT_KEYWORDS = (
    (DatabaseVerdict.FALSE, (
        "false", "incorrect", "inaccurate", "untrue", "wrong",
        "not true", "not accurate", "not correct",
    )),
    (DatabaseVerdict.TRUE, ("true", "correct", "accurate")),
    (DatabaseVerdict.MIXED, ("mixed", "partly", "partially")),
    (DatabaseVerdict.DISPUTED, ("disputed", "contested")),
)


def normalize_verdict(textual_rating: Optional[str]) -> DatabaseVerdict:
    """Map a publisher's free-text rating onto the shared verdict vocabulary."""
    if not textual_rating:
        return DatabaseVerdict.UNPROVEN
    rating = textual_rating.lower()
    for verdict, keywords in _VERDICT_KEYWORDS:
        if any(keyword in rating for keyword in keywords):
            return verdict
    return DatabaseVerdict.UNPROVEN


def rating_confidence(textual_rating: Optional[str]) -> float:
    """Confidence implied by the strength of a publisher's rating."""
    if not textual_rating:
        return 0.5
    rating = textual_rating.lower()
    if "pants on fire" in rating or "completely false" in rating:
        return 0.95
    if "false" in rating or "true" in rating:
        return 0.90
    if "mostly" in rating:
        return 0.80
    if "half" in rating or "mixed" in rating:
        return 0.70
    return 0.60


def to_fact_check(review: DatabaseReview, query: str) -> DatabaseFactCheck:
    """Normalize a raw provider review."""
    return DatabaseFactCheck(
        claim=review.claim_text or query,
        verdict=normalize_verdict(review.textual_rating),
        confidence=rating_confidence(review.textual_rating),
        source=review.publisher or "Unknown",
        url=review.url or "",
        date=review.review_date or datetime.now(timezone.utc).isoformat(),
        explanation=review.claimant or "No explanation provided",
    )


def aggregate_results(results: Sequence[DatabaseSearchResult]) -> AggregatedFactCheck:
    """Majority verdict over the reviews of every successful search."""
    reviews = [review for result in results if result.success for review in result.results]
    if not reviews:
        return AggregatedFactCheck(
            overall_verdict=DatabaseVerdict.UNPROVEN,
            confidence=0.3,
            sources=[],
            consensus=0.0,
        )

    counts = Counter(review.verdict for review in reviews)
    verdict, top_count = counts.most_common(1)[0]
    consensus = top_count / len(reviews)
    mean_confidence = sum(review.confidence for review in reviews) / len(reviews)
    return AggregatedFactCheck(
        overall_verdict=verdict,
        confidence=mean_confidence * consensus,
        sources=reviews,
        consensus=consensus,
    )


class FactCheckDatabaseService:
    """Fans a claim out to every configured fact-check database."""

    def __init__(self, providers: Optional[List[FactCheckDatabaseProvider]] = None):
        """Initialize the service.

        Args:
            providers: Database providers to query
        """
        self._providers = list(providers or [])
        logger.info(f"🔧 FactCheckDatabaseService initialized with {len(self._providers)} providers")

    @property
    def providers(self) -> List[FactCheckDatabaseProvider]:
        return list(self._providers)

    @property
    def available_providers(self) -> List[FactCheckDatabaseProvider]:
        return [provider for provider in self._providers if provider.is_available]

    @property
    def is_available(self) -> bool:
        """Whether at least one provider is configured."""
        return bool(self.available_providers)

    async def search_fact_check_databases(self, claim: str) -> List[DatabaseSearchResult]:
        """Search every available provider in parallel.

        Args:
            claim: Claim text to look up

        Returns:
            One result per available provider; failed providers report
            ``success=False``
        """
        providers = self.available_providers
        logger.info(f"🗄️ Searching {len(providers)} fact-check databases for: {claim[:50]}...")

        outcomes = await asyncio.gather(
            *(self._search_provider(provider, claim) for provider in providers),
            return_exceptions=True,
        )

        results = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, BaseException):
                results.append(DatabaseSearchResult(
                    database=provider.provider_name,
                    success=False,
                    error=str(outcome) or "Unknown error",
                ))
            else:
                results.append(outcome)
        return results

    async def _search_provider(self, provider: FactCheckDatabaseProvider, claim: str) -> DatabaseSearchResult:
        started = time.perf_counter()
        try:
            reviews = await provider.search(claim)
        except Exception as e:
            logger.error(f"❌ Failed to search {provider.provider_name}: {e}")
            return DatabaseSearchResult(
                database=provider.provider_name,
                search_time=(time.perf_counter() - started) * 1000,
                success=False,
                error=str(e) or "Unknown error",
            )

        return DatabaseSearchResult(
            database=provider.provider_name,
            results=[to_fact_check(review, claim) for review in reviews],
            search_time=(time.perf_counter() - started) * 1000,
            success=True,
        )

    async def get_aggregated_fact_check(self, claim: str) -> AggregatedFactCheck:
        """Search every provider and reduce the reviews to one verdict."""
        return aggregate_results(await self.search_fact_check_databases(claim))

    async def get_health_status(self) -> ServiceHealth:
        """Report which providers answer a test query."""
        providers = self._providers
        outcomes = await asyncio.gather(
            *(provider.check_health() for provider in providers),
            return_exceptions=True,
        )
        online = [outcome is True for outcome in outcomes]
        healthy_count = sum(online)

        if providers and healthy_count == len(providers):
            status = HealthStatus.HEALTHY
        elif healthy_count > 0:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return ServiceHealth(
            name="fact_check_databases",
            status=status,
            details={
                "available_databases": healthy_count,
                "total_databases": len(providers),
                "databases": [
                    {"name": provider.provider_name, "status": "online" if is_online else "offline"}
                    for provider, is_online in zip(providers, online)
                ],
            },
        )

    async def shutdown(self) -> None:
        for provider in self._providers:
            await provider.shutdown()
