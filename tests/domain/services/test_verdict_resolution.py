"""Tests for verdict resolution and aggregation."""

import pytest

from credibility_checker.domain.models.analysis import EnhancedClaim
from credibility_checker.domain.models.claim import ClaimCategory
from credibility_checker.domain.models.database import DatabaseFactCheck, DatabaseSearchResult, DatabaseVerdict
from credibility_checker.domain.models.fact_check_result import FactCheckResult
from credibility_checker.domain.models.reasoning import ReasoningAnalysis
from credibility_checker.domain.models.verification import RiskLevel, VerificationStatus
from credibility_checker.domain.services.fact_checking_service import neutral_assessment
from credibility_checker.domain.services.verdict_resolution import (
    VerdictSignal,
    aggregate_assessment,
    database_signal,
    no_claims_assessment,
    reasoning_signal,
    resolve_harm_potential,
    resolve_verdict,
)


def db_result(*verdicts, success=True):
    return DatabaseSearchResult(
        database="DB",
        success=success,
        results=[
            DatabaseFactCheck(claim="c", verdict=v, confidence=0.9, source="s", url="", date="", explanation="")
            for v in verdicts
        ],
    )


def reasoning(score, risk=RiskLevel.MEDIUM, confidence=0.8):
    return ReasoningAnalysis(
        is_factual=True, credibility_score=score, risk_level=risk, reasoning="r", confidence=confidence,
    )


def enhanced(score, verdict, harm, reasoning_analysis=None, index=1):
    return EnhancedClaim(
        id=f"claim_{index}",
        text=f"Claim number {index}",
        confidence=0.9,
        category=ClaimCategory.FACTUAL,
        fact_check_result=FactCheckResult(
            claim_id=f"claim_{index}",
            original_claim=f"Claim number {index}",
            credibility_score=score,
            credibility_assessment=neutral_assessment(),
            verification_status=verdict,
            processing_time=1.0,
        ),
        reasoning_analysis=reasoning_analysis,
        final_verdict=verdict,
        harm_potential=harm,
    )


def test_highest_priority_signal_wins():
    signals = [
        VerdictSignal("fact_checking", VerificationStatus.DISPUTED, 0),
        VerdictSignal("database_search", VerificationStatus.FALSE, 1),
        VerdictSignal("reasoning", None, 2),
    ]

    assert resolve_verdict(signals) == VerificationStatus.FALSE
    assert resolve_verdict([]) == VerificationStatus.UNVERIFIED


def test_database_signal_requires_strict_majority():
    assert database_signal([db_result(DatabaseVerdict.FALSE, DatabaseVerdict.FALSE, DatabaseVerdict.TRUE)]).verdict == VerificationStatus.FALSE
    assert database_signal([db_result(DatabaseVerdict.TRUE)]).verdict == VerificationStatus.VERIFIED
    assert database_signal([db_result(DatabaseVerdict.TRUE, DatabaseVerdict.FALSE)]).verdict is None
    assert database_signal([db_result(DatabaseVerdict.MIXED)]).verdict is None
    assert database_signal([db_result(DatabaseVerdict.FALSE, success=False)]).verdict is None


def test_reasoning_signal_thresholds():
    assert reasoning_signal(reasoning(0.2)).verdict == VerificationStatus.FALSE
    assert reasoning_signal(reasoning(0.9)).verdict == VerificationStatus.VERIFIED
    assert reasoning_signal(reasoning(0.3)).verdict is None
    assert reasoning_signal(reasoning(0.8)).verdict is None
    assert reasoning_signal(None).verdict is None


def test_harm_potential_precedence():
    assert resolve_harm_potential(ClaimCategory.FACTUAL, 0.9, RiskLevel.LOW, RiskLevel.CRITICAL) == RiskLevel.CRITICAL
    assert resolve_harm_potential(ClaimCategory.FACTUAL, 0.9, RiskLevel.LOW) == RiskLevel.LOW
    assert resolve_harm_potential(ClaimCategory.FACTUAL, 0.2, None) == RiskLevel.HIGH
    assert resolve_harm_potential(ClaimCategory.OPINION, 0.2, None) == RiskLevel.MEDIUM


def test_no_claims_assessment():
    assessment = no_claims_assessment()

    assert assessment.credibility_score == 0.5
    assert assessment.risk_level == RiskLevel.LOW
    assert assessment.confidence == 0.3
    assert assessment.reasoning == "No factual claims found to analyze"
    assert aggregate_assessment([]) == assessment


def test_aggregate_assessment_template():
    claims = [
        enhanced(0.2, VerificationStatus.FALSE, RiskLevel.MEDIUM, index=1),
        enhanced(0.9, VerificationStatus.VERIFIED, RiskLevel.LOW, reasoning(0.9, confidence=0.6), index=2),
    ]

    assessment = aggregate_assessment(claims)

    assert assessment.credibility_score == pytest.approx(0.55)
    assert assessment.confidence == pytest.approx((0.3 + 0.6) / 2)
    assert assessment.risk_level == RiskLevel.LOW
    assert assessment.reasoning == (
        "Analysis of 2 claims: 1 false claims detected. 1 claims verified. "
        "Overall credibility: 55%. Risk level: low."
    )


def test_aggregate_omits_zero_counts():
    assessment = aggregate_assessment([enhanced(0.4, VerificationStatus.DISPUTED, RiskLevel.MEDIUM)])

    assert assessment.reasoning == "Analysis of 1 claims: Overall credibility: 40%. Risk level: medium."


def test_critical_claim_forces_critical_risk():
    claims = [
        enhanced(0.95, VerificationStatus.VERIFIED, RiskLevel.LOW, index=1),
        enhanced(0.9, VerificationStatus.VERIFIED, RiskLevel.CRITICAL, index=2),
        enhanced(0.9, VerificationStatus.VERIFIED, RiskLevel.HIGH, index=3),
    ]

    assert aggregate_assessment(claims).risk_level == RiskLevel.CRITICAL
    assert aggregate_assessment(claims[::2]).risk_level == RiskLevel.HIGH
