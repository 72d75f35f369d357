"""Verdict and risk vocabularies shared across the pipeline."""

from enum import Enum


class VerificationStatus(str, Enum):
    """Possible verification outcomes for a claim."""

    VERIFIED = "verified"  # Supported by reliable, agreeing evidence
    DISPUTED = "disputed"  # Weak or mixed evidence
    UNVERIFIED = "unverified"  # Plausible but not confirmed
    FALSE = "false"  # Contradicted or very low credibility


class RiskLevel(str, Enum):
    """Estimated real-world risk if the claim is believed."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        """Ordinal used to compare risk levels."""
        return _SEVERITY[self]


_SEVERITY = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


def risk_level_for_score(score: float) -> RiskLevel:
    """Map a credibility score in [0, 1] to a risk level."""
    if score >= 0.8:
        return RiskLevel.LOW
    elif score >= 0.6:
        return RiskLevel.MEDIUM
    elif score >= 0.4:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL
