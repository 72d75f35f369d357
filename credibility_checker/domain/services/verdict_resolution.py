"""Merging of per-claim signals into final verdicts and an overall assessment."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..models.analysis import EnhancedClaim, OverallAssessment
from ..models.claim import ClaimCategory
from ..models.database import DatabaseSearchResult, DatabaseVerdict
from ..models.fact_check_result import FactCheckResult
from ..models.reasoning import ReasoningAnalysis
from ..models.verification import RiskLevel, VerificationStatus

SCORER_PRIORITY = 0
DATABASE_PRIORITY = 1
REASONING_PRIORITY = 2

NO_CLAIMS_REASONING = "No factual claims found to analyze"


@dataclass(frozen=True)
class VerdictSignal:
    """One input to a claim's final verdict.

    A signal without a verdict abstains. Among the rest, the one with the
    highest priority wins.
    """
    source: str
    verdict: Optional[VerificationStatus]
    priority: int


def resolve_verdict(signals: Iterable[VerdictSignal]) -> VerificationStatus:
    """Pick the verdict of the highest-priority non-abstaining signal."""
    winner: Optional[VerdictSignal] = None
    for signal in signals:
        if signal.verdict is None:
            continue
        if winner is None or signal.priority >= winner.priority:
            winner = signal
    return winner.verdict if winner is not None else VerificationStatus.UNVERIFIED


def scorer_signal(result: FactCheckResult) -> VerdictSignal:
    return VerdictSignal("fact_checking", result.verification_status, SCORER_PRIORITY)


def database_signal(results: Sequence[DatabaseSearchResult]) -> VerdictSignal:
    """Majority of true against false reviews, abstaining on a tie."""
    reviews = [review for result in results if result.success for review in result.results]
    false_count = sum(1 for review in reviews if review.verdict == DatabaseVerdict.FALSE)
    true_count = sum(1 for review in reviews if review.verdict == DatabaseVerdict.TRUE)

    verdict = None
    if false_count > true_count:
        verdict = VerificationStatus.FALSE
    elif true_count > false_count:
        verdict = VerificationStatus.VERIFIED
    return VerdictSignal("database_search", verdict, DATABASE_PRIORITY)


def reasoning_signal(analysis: Optional[ReasoningAnalysis]) -> VerdictSignal:
    """Override only on a decisive generative score."""
    verdict = None
    if analysis is not None:
        if analysis.credibility_score < 0.3:
            verdict = VerificationStatus.FALSE
        elif analysis.credibility_score > 0.8:
            verdict = VerificationStatus.VERIFIED
    return VerdictSignal("reasoning", verdict, REASONING_PRIORITY)


def resolve_harm_potential(
    category: ClaimCategory,
    credibility_score: float,
    scorer_risk: Optional[RiskLevel],
    reasoning_risk: Optional[RiskLevel] = None,
) -> RiskLevel:
    """Harm potential of a claim, preferring the generative risk estimate."""
    if reasoning_risk is not None:
        return reasoning_risk
    if scorer_risk is not None:
        return scorer_risk
    if category == ClaimCategory.FACTUAL and credibility_score < 0.3:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


def no_claims_assessment() -> OverallAssessment:
    return OverallAssessment(
        credibility_score=0.5,
        risk_level=RiskLevel.LOW,
        confidence=0.3,
        reasoning=NO_CLAIMS_REASONING,
    )


def aggregate_assessment(claims: List[EnhancedClaim]) -> OverallAssessment:
    """Reduce per-claim results to one overall assessment."""
    if not claims:
        return no_claims_assessment()

    mean_score = sum(claim.fact_check_result.credibility_score for claim in claims) / len(claims)
    mean_confidence = sum(
        claim.reasoning_analysis.confidence if claim.reasoning_analysis is not None
        else claim.fact_check_result.credibility_assessment.confidence
        for claim in claims
    ) / len(claims)

    harm = {claim.harm_potential for claim in claims}
    if RiskLevel.CRITICAL in harm:
        risk = RiskLevel.CRITICAL
    elif RiskLevel.HIGH in harm:
        risk = RiskLevel.HIGH
    elif mean_score < 0.5:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW

    false_count = sum(1 for claim in claims if claim.final_verdict == VerificationStatus.FALSE)
    verified_count = sum(1 for claim in claims if claim.final_verdict == VerificationStatus.VERIFIED)

    reasoning = f"Analysis of {len(claims)} claims: "
    if false_count:
        reasoning += f"{false_count} false claims detected. "
    if verified_count:
        reasoning += f"{verified_count} claims verified. "
    reasoning += f"Overall credibility: {int(mean_score * 100 + 0.5)}%. Risk level: {risk.value}."

    return OverallAssessment(
        credibility_score=min(1.0, max(0.0, mean_score)),
        risk_level=risk,
        confidence=min(1.0, max(0.0, mean_confidence)),
        reasoning=reasoning,
    )
