"""Service for scoring the credibility of individual claims."""

import logging
import time
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from ..models.analysis import HealthStatus, ServiceHealth
from ..models.claim import Claim
from ..models.fact_check_result import (
    CredibilityAssessment,
    CredibilityFactors,
    FactCheckingOptions,
    FactCheckResult,
)
from ..models.source import Source, SourceGenerationOptions, SourceStance
from ..models.verification import RiskLevel, VerificationStatus, risk_level_for_score
from ..ports.ml_provider import ZeroShotClassifier
from .source_generation_service import SourceGenerationService, normalize_domain

logger = logging.getLogger(__name__)

TRUSTED_DOMAINS: Mapping[str, float] = MappingProxyType({
    "snopes.com": 0.95,
    "factcheck.org": 0.93,
    "politifact.com": 0.91,
    "reuters.com": 0.89,
    "apnews.com": 0.88,
    "bbc.com": 0.87,
    "npr.org": 0.86,
    "cnn.com": 0.75,
    "nytimes.com": 0.82,
    "washingtonpost.com": 0.81,
    "theguardian.com": 0.80,
    "wikipedia.org": 0.70,
    "scholar.google.com": 0.85,
    "pubmed.ncbi.nlm.nih.gov": 0.92,
    "nature.com": 0.94,
    "science.org": 0.93,
})

UNKNOWN_DOMAIN_RELIABILITY = 0.5

CREDIBILITY_LABELS = ["factual", "misleading", "false", "opinion", "unverifiable"]

WEIGHTS = {
    "source_reliability": 0.30,
    "evidence_strength": 0.25,
    "consensus_level": 0.20,
    "recency": 0.10,
    "author_credibility": 0.15,
}

AUTHOR_CREDIBILITY = 0.7
NEUTRAL_AI_ASSESSMENT = 0.5
DEFAULT_CONFIDENCE = 0.3
FAILED_REASONING = "Unable to complete a full credibility assessment due to a processing error."


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def ai_assessment_for(label: str, score: float) -> float:
    """Map the classifier's top label and score to a credibility scalar."""
    if label == "factual":
        return 0.7 + score * 0.3
    elif label == "misleading":
        return 0.4 + score * 0.2
    elif label == "false":
        return 0.1 + score * 0.2
    elif label == "opinion":
        return 0.6
    return NEUTRAL_AI_ASSESSMENT


def _parse_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def recency_score(sources: List[Source], now: datetime) -> float:
    """Mean freshness of sources, decaying linearly over a year to a 0.3 floor."""
    if not sources:
        return 0.5
    total = 0.0
    for source in sources:
        published = _parse_date(source.publish_date) if source.publish_date else None
        if published is None:
            total += 0.5
            continue
        days = (now - published).total_seconds() / 86400
        total += min(1.0, max(0.3, 1 - days / 365))
    return _clamp(total / len(sources))


def compute_factors(sources: List[Source], now: datetime) -> CredibilityFactors:
    """Compute the five credibility factors for a source set."""
    total = len(sources)
    supporting = sum(1 for source in sources if source.fact_check_result == SourceStance.SUPPORTS)
    contradicting = sum(1 for source in sources if source.fact_check_result == SourceStance.CONTRADICTS)

    source_reliability = sum(source.reliability for source in sources) / total if total else 0.3

    evidence_strength = 0.5
    if total:
        if supporting > contradicting:
            evidence_strength = 0.7 + supporting / total * 0.3
        elif contradicting > supporting:
            evidence_strength = 0.3 - contradicting / total * 0.3

    consensus_level = max(supporting, contradicting) / total if total else 0.3

    return CredibilityFactors(
        source_reliability=_clamp(source_reliability),
        evidence_strength=_clamp(evidence_strength),
        consensus_level=_clamp(consensus_level),
        recency=recency_score(sources, now),
        author_credibility=AUTHOR_CREDIBILITY,
    )


def weighted_score(factors: CredibilityFactors) -> float:
    """Weighted sum of the credibility factors."""
    return _clamp(sum(getattr(factors, name) * weight for name, weight in WEIGHTS.items()))


def build_reasoning(
    factors: CredibilityFactors,
    sources: List[Source],
    ai_assessment: float,
) -> str:
    """Assemble a deterministic explanation of an assessment."""
    reasons = []

    if factors.source_reliability >= 0.8:
        reasons.append("High-quality sources with strong reliability ratings")
    elif factors.source_reliability >= 0.6:
        reasons.append("Moderately reliable sources")
    else:
        reasons.append("Limited reliable source verification")

    if factors.evidence_strength >= 0.7:
        reasons.append("Strong supporting evidence from multiple sources")
    elif factors.evidence_strength <= 0.4:
        reasons.append("Contradictory or weak evidence")

    if factors.consensus_level >= 0.7:
        reasons.append("High consensus among fact-checking sources")
    elif factors.consensus_level <= 0.4:
        reasons.append("Low consensus or conflicting information")

    if not sources:
        reasons.append("No verifiable sources found")
    elif len(sources) >= 3:
        reasons.append(f"Verified against {len(sources)} independent sources")

    supporting = sum(1 for source in sources if source.fact_check_result == SourceStance.SUPPORTS)
    contradicting = sum(1 for source in sources if source.fact_check_result == SourceStance.CONTRADICTS)
    if supporting > contradicting:
        reasons.append(f"{supporting} sources support the claim")
    elif contradicting > supporting:
        reasons.append(f"{contradicting} sources contradict the claim")

    if ai_assessment >= 0.7:
        reasons.append("Language analysis reads the claim as a factual statement")
    elif ai_assessment < 0.4:
        reasons.append("Language analysis flags the claim as likely false")

    return ". ".join(reasons) + "."


def determine_status(score: float, sources: List[Source]) -> VerificationStatus:
    """Map a score and source stances to a verification status."""
    supporting = sum(1 for source in sources if source.fact_check_result == SourceStance.SUPPORTS)
    contradicting = sum(1 for source in sources if source.fact_check_result == SourceStance.CONTRADICTS)

    if score >= 0.8 and supporting > contradicting:
        return VerificationStatus.VERIFIED
    elif score <= 0.3 or contradicting > supporting:
        return VerificationStatus.FALSE
    elif score >= 0.6:
        return VerificationStatus.UNVERIFIED
    return VerificationStatus.DISPUTED


def neutral_assessment(reasoning: str = FAILED_REASONING) -> CredibilityAssessment:
    """Assessment returned when scoring fails."""
    return CredibilityAssessment(
        overall_score=0.5,
        confidence=DEFAULT_CONFIDENCE,
        factors=CredibilityFactors.neutral(),
        reasoning=reasoning,
        risk_level=RiskLevel.MEDIUM,
    )


class FactCheckingService:
    """Service for multi-factor credibility scoring of claims."""

    def __init__(
        self,
        classifier: Optional[ZeroShotClassifier] = None,
        source_generator: Optional[SourceGenerationService] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        trusted_domains: Mapping[str, float] = TRUSTED_DOMAINS,
    ):
        """Initialize the service.

        Args:
            classifier: Zero-shot classifier for the cross-check, optional
            source_generator: Used when no shared sources are supplied
            clock: Current time, used for recency
            trusted_domains: Read-only domain reliability table
        """
        self._classifier = classifier
        self._sources = source_generator
        self._now = clock
        self._trusted = MappingProxyType(dict(trusted_domains))
        logger.info("🔧 FactCheckingService initialized")

    async def fact_check_claim(
        self,
        claim: Claim,
        options: Optional[FactCheckingOptions] = None,
        shared_sources: Optional[List[Source]] = None,
    ) -> FactCheckResult:
        """Score one claim. Never raises.

        Args:
            claim: Claim to score
            options: Scoring options
            shared_sources: Evidence pool to score against; gathered
                independently when None

        Returns:
            Fact check result, neutral when scoring fails
        """
        options = options or FactCheckingOptions()
        started = time.perf_counter()
        logger.info(f"🔍 Fact checking claim {claim.id}: {claim.text[:50]}...")

        try:
            if not claim.text.strip():
                raise ValueError("Claim text is empty")

            sources = await self._select_sources(claim.text, options, shared_sources)
            assessment = await self.assess_credibility(claim.text, sources)
            status = determine_status(assessment.overall_score, sources)
        except Exception as e:
            logger.error(f"❌ Fact check failed for claim {claim.id}: {e}")
            return FactCheckResult(
                claim_id=claim.id,
                original_claim=claim.text,
                credibility_score=0.5,
                credibility_assessment=neutral_assessment(),
                sources=[],
                verification_status=VerificationStatus.UNVERIFIED,
                processing_time=(time.perf_counter() - started) * 1000,
            )

        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            f"✅ Claim {claim.id}: {status.value} "
            f"(score {assessment.overall_score:.2f}) in {elapsed:.0f}ms"
        )
        return FactCheckResult(
            claim_id=claim.id,
            original_claim=claim.text,
            credibility_score=assessment.overall_score,
            credibility_assessment=assessment,
            sources=sources,
            verification_status=status,
            processing_time=elapsed,
        )

    async def fact_check_claims(
        self,
        claims: List[Claim],
        options: Optional[FactCheckingOptions] = None,
        shared_sources: Optional[List[Source]] = None,
    ) -> List[FactCheckResult]:
        """Score claims one after another."""
        logger.info(f"📋 Batch fact check of {len(claims)} claims")
        return [await self.fact_check_claim(claim, options, shared_sources) for claim in claims]

    async def _select_sources(
        self,
        claim_text: str,
        options: FactCheckingOptions,
        shared_sources: Optional[List[Source]],
    ) -> List[Source]:
        if shared_sources is None:
            if self._sources is None:
                return []
            shared_sources = await self._sources.generate_sources(
                claim_text,
                SourceGenerationOptions(
                    max_sources=options.max_sources,
                    min_reliability=options.min_source_reliability,
                ),
            )
        return [source for source in shared_sources if source.reliability >= options.min_source_reliability]

    async def assess_credibility(self, claim_text: str, sources: List[Source]) -> CredibilityAssessment:
        """Compute the multi-factor assessment of a claim against sources."""
        factors = compute_factors(sources, self._now())
        ai_assessment = await self._ai_assessment(claim_text)
        overall = weighted_score(factors)
        return CredibilityAssessment(
            overall_score=overall,
            confidence=min(0.9, factors.source_reliability + factors.consensus_level * 0.3),
            factors=factors,
            reasoning=build_reasoning(factors, sources, ai_assessment),
            risk_level=risk_level_for_score(overall),
            ai_assessment=ai_assessment,
        )

    async def _ai_assessment(self, claim_text: str) -> float:
        if self._classifier is None:
            return NEUTRAL_AI_ASSESSMENT
        try:
            result = await self._classifier.classify(claim_text, CREDIBILITY_LABELS)
            return _clamp(ai_assessment_for(result.top_label, result.top_score))
        except Exception as e:
            logger.warning(f"⚠️ AI credibility cross-check failed: {e}")
            return NEUTRAL_AI_ASSESSMENT

    def get_domain_reliability(self, domain: str) -> float:
        """Reliability of a domain, 0.5 when it is not trusted."""
        return self._trusted.get(normalize_domain(domain), UNKNOWN_DOMAIN_RELIABILITY)

    def is_domain_trusted(self, domain: str) -> bool:
        return normalize_domain(domain) in self._trusted

    @property
    def trusted_domains(self) -> Mapping[str, float]:
        return self._trusted

    async def get_health_status(self) -> ServiceHealth:
        """Report scorer health, probing the classifier when configured."""
        details = {"trusted_domains": len(self._trusted), "classifier": self._classifier is not None}
        if self._classifier is None:
            return ServiceHealth(name="fact_checking", status=HealthStatus.DEGRADED, details=details)
        try:
            await self._classifier.classify("Water boils at 100 degrees Celsius at sea level.", CREDIBILITY_LABELS)
            return ServiceHealth(name="fact_checking", status=HealthStatus.HEALTHY, details=details)
        except Exception as e:
            logger.warning(f"⚠️ Fact checking health check failed: {e}")
            details["error"] = str(e)
            return ServiceHealth(name="fact_checking", status=HealthStatus.DEGRADED, details=details)
