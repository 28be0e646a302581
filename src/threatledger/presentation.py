"""
Presentation helpers for the analysis and reputation views.

Pure functions over models; no I/O.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

from .models import (
    BatchStatus,
    LedgerStatus,
    ReputationScore,
    Statistics,
    SubmissionReport,
    ThreatLevel,
    TrustLevel,
)

CLEAN_RECORD_MESSAGE = "This sender has a clean record with no reported incidents"


@dataclass(frozen=True)
class TrustPresentation:
    """Label, badge, tone and recommendation shown for a trust level."""
    level: str
    label: str
    badge: str
    tone: str  # success | info | warning | danger | neutral
    recommendation: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


_TRUST_PRESENTATIONS = {
    TrustLevel.TRUSTED: TrustPresentation(
        level=TrustLevel.TRUSTED.value,
        label="Trusted",
        badge="✓ Trusted",
        tone="success",
        recommendation=(
            "This sender has a strong reputation with no reported incidents. "
            "Emails from this address are likely safe."
        )
    ),
    TrustLevel.NEUTRAL: TrustPresentation(
        level=TrustLevel.NEUTRAL.value,
        label="Neutral",
        badge="○ Neutral",
        tone="info",
        recommendation=(
            "This sender has limited history. Exercise normal caution when "
            "interacting with emails from this address."
        )
    ),
    TrustLevel.SUSPICIOUS: TrustPresentation(
        level=TrustLevel.SUSPICIOUS.value,
        label="Suspicious",
        badge="⚠ Suspicious",
        tone="warning",
        recommendation=(
            "This sender has some reported incidents. Be cautious and verify "
            "any suspicious content before taking action."
        )
    ),
    TrustLevel.DANGEROUS: TrustPresentation(
        level=TrustLevel.DANGEROUS.value,
        label="Dangerous",
        badge="✗ Dangerous",
        tone="danger",
        recommendation=(
            "This sender has multiple verified malicious reports. DO NOT trust "
            "emails from this address and avoid clicking any links."
        )
    ),
}


def describe_trust_level(level: Optional[Union[TrustLevel, str]]) -> TrustPresentation:
    """
    Map a trust level to its presentation.

    Levels the scorer may add later fall through to an explicit unknown
    variant instead of raising.
    """
    parsed = TrustLevel.parse(level) if level is not None else None
    if isinstance(parsed, TrustLevel):
        return _TRUST_PRESENTATIONS[parsed]

    return TrustPresentation(
        level="unknown" if not level else str(level),
        label="Unknown",
        badge="? Unknown",
        tone="neutral",
        recommendation="No reputation guidance is available for this trust level."
    )


def reputation_view(score: ReputationScore) -> Dict[str, Any]:
    """Everything the reputation page shows for one sender."""
    return {
        'sender': score.sender,
        'score': round(score.score),
        'total_proofs': score.total_proofs,
        'confidence': 95 if score.total_proofs > 0 else 50,
        'trust': describe_trust_level(score.trust_level).to_dict(),
        'proof_history': [r.to_dict() for r in score.proof_records],
        'history_message': None if score.proof_records else CLEAN_RECORD_MESSAGE
    }


def truncate_identity(identity: Optional[str]) -> str:
    """Shorten a ledger address to ``abcd...wxyz``."""
    if not identity:
        return ""
    if len(identity) <= 8:
        return identity
    return f"{identity[:4]}...{identity[-4:]}"


def level_breakdown(statistics: Statistics) -> Dict[str, float]:
    """Share (in percent) of each threat level among detected threats."""
    breakdown = {}
    for level in (ThreatLevel.CRITICAL, ThreatLevel.HIGH, ThreatLevel.MEDIUM, ThreatLevel.LOW):
        if statistics.threat_count > 0:
            breakdown[level.value] = statistics.by_level[level] / statistics.threat_count * 100
        else:
            breakdown[level.value] = 0.0
    return breakdown


def submission_notice(report: SubmissionReport) -> Optional[str]:
    """Aggregate success notice; only claimed when no message failed."""
    if report.status != BatchStatus.ALL_SUCCEEDED:
        return None
    return f"✅ Successfully submitted all {report.success_count} proofs to the ledger!"


def readiness_hint(status: LedgerStatus, statistics: Statistics) -> str:
    if not status.is_ready:
        return "⚠️ Connect your wallet to submit proofs"
    if statistics.threat_count == 0:
        return "ℹ️ No threats detected. All emails are safe!"
    return f"✅ Ready to submit {statistics.threat_count} proof(s) to the ledger"
