"""
Data models for the threat-statistics and proof-submission pipeline.
"""

import base64
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple, Union
from enum import Enum


class ThreatLevel(str, Enum):
    """Severity of a detected malicious message."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    SAFE = "Safe"


class EventType(str, Enum):
    """Category of malicious intent."""
    PHISHING = "Phishing"
    SPAM = "Spam"
    MALWARE = "Malware"
    SOCIAL_ENGINEERING = "SocialEngineering"


class TrustLevel(str, Enum):
    """Coarse sender reputation classes returned by the scorer."""
    TRUSTED = "Trusted"
    NEUTRAL = "Neutral"
    SUSPICIOUS = "Suspicious"
    DANGEROUS = "Dangerous"

    @classmethod
    def parse(cls, value: Any) -> Union["TrustLevel", str]:
        """Return the matching member, or the raw value if the scorer sent a level we don't know."""
        try:
            return cls(value)
        except ValueError:
            return str(value)


class SubmissionStage(str, Enum):
    """Pipeline stage at which a per-message failure happened."""
    CLASSIFICATION = "classification"
    PROOF_GENERATION = "proof_generation"
    SUBMISSION = "submission"


class BatchStatus(str, Enum):
    """Overall result of a submission run."""
    ALL_SUCCEEDED = "all_succeeded"
    PARTIAL_FAILURE = "partial_failure"
    BATCH_REJECTED = "batch_rejected"


class RejectionReason(str, Enum):
    """Why a submission run was rejected before any per-message work."""
    NOT_READY = "not_ready"
    EMPTY_BATCH = "empty_batch"
    RUN_IN_PROGRESS = "run_in_progress"


@dataclass(frozen=True)
class Attachment:
    filename: str
    size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'filename': self.filename, 'size': self.size}


@dataclass(frozen=True)
class Message:
    """
    A message as delivered by the inbox provider.
    Owned by the inbox collaborator; the pipeline never modifies it.
    """
    id: str
    sender: str
    to: Tuple[str, ...] = ()
    subject: str = ""
    body: str = ""
    date: str = ""
    attachments: Tuple[Attachment, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Build a message from the provider's JSON (``from`` is accepted as the sender key)."""
        recipients = data.get('to') or ()
        if isinstance(recipients, str):
            recipients = (recipients,)
        return cls(
            id=str(data['id']),
            sender=data.get('from', data.get('sender', '')),
            to=tuple(recipients),
            subject=data.get('subject', ''),
            body=data.get('body', ''),
            date=data.get('date', ''),
            attachments=tuple(
                Attachment(filename=a.get('filename', ''), size=int(a.get('size', 0)))
                for a in data.get('attachments') or ()
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'from': self.sender,
            'to': list(self.to),
            'subject': self.subject,
            'body': self.body,
            'date': self.date,
            'attachments': [a.to_dict() for a in self.attachments]
        }


@dataclass
class ClassificationResult:
    """Classifier verdict for a single message."""
    is_malicious: bool
    threat_level: ThreatLevel = ThreatLevel.SAFE
    event_type: EventType = EventType.SPAM
    confidence: float = 0.0  # 0-1
    detected_keywords: List[str] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassificationResult":
        confidence = float(data.get('confidence', 0.0))
        return cls(
            is_malicious=bool(data['isMalicious']),
            threat_level=ThreatLevel(data.get('threatLevel', ThreatLevel.SAFE.value)),
            event_type=EventType(data.get('eventType', EventType.SPAM.value)),
            confidence=max(0.0, min(1.0, confidence)),
            detected_keywords=list(data.get('detectedKeywords') or []),
            reasons=list(data.get('reasons') or [])
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isMalicious': self.is_malicious,
            'threatLevel': self.threat_level.value,
            'eventType': self.event_type.value,
            'confidence': self.confidence,
            'detectedKeywords': list(self.detected_keywords),
            'reasons': list(self.reasons)
        }


@dataclass
class ProofArtifact:
    """
    Cryptographic proof for one malicious message.
    Consumed by exactly one submission attempt.
    """
    proof_bytes: bytes
    public_inputs: Dict[str, Any] = field(default_factory=dict)  # eventType, timestamp, ...

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofArtifact":
        return cls(
            proof_bytes=base64.b64decode(data.get('proofBytes', '')),
            public_inputs=dict(data.get('publicInputs') or {})
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'proofBytes': base64.b64encode(self.proof_bytes).decode('ascii'),
            'publicInputs': dict(self.public_inputs)
        }


@dataclass
class SubmissionError:
    """A per-message failure recorded during a submission run."""
    email_identifier: str
    error: str
    sender: str = ""
    stage: SubmissionStage = SubmissionStage.SUBMISSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            'email_identifier': self.email_identifier,
            'error': self.error,
            'sender': self.sender,
            'stage': self.stage.value
        }


@dataclass
class SubmissionOutcome:
    """Exactly one of ``confirmation_id`` or ``error`` is set."""
    email_identifier: str
    confirmation_id: Optional[str] = None
    error: Optional[SubmissionError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.confirmation_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'email_identifier': self.email_identifier,
            'confirmation_id': self.confirmation_id,
            'error': self.error.to_dict() if self.error else None
        }


def _empty_level_counts() -> Dict[ThreatLevel, int]:
    return {level: 0 for level in ThreatLevel}


def _empty_type_counts() -> Dict[EventType, int]:
    return {event_type: 0 for event_type in EventType}


@dataclass
class Statistics:
    """
    Threat counters over one message set.
    Derived data: always rebuilt from scratch, never patched.
    """
    total: int = 0
    safe_count: int = 0
    threat_count: int = 0
    failed_count: int = 0
    by_level: Dict[ThreatLevel, int] = field(default_factory=_empty_level_counts)
    by_type: Dict[EventType, int] = field(default_factory=_empty_type_counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'safe': self.safe_count,
            'threats': self.threat_count,
            'failed': self.failed_count,
            'byLevel': {level.value: count for level, count in self.by_level.items()},
            'byType': {event_type.value: count for event_type, count in self.by_type.items()}
        }


@dataclass
class ProofRecord:
    event_type: str
    timestamp: str
    proof_hash: str
    score: float = 0.0
    verified: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofRecord":
        return cls(
            event_type=data.get('eventType', ''),
            timestamp=str(data.get('timestamp', '')),
            proof_hash=data.get('proofHash', ''),
            score=float(data.get('score', 0.0)),
            verified=bool(data.get('verified', False))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'eventType': self.event_type,
            'timestamp': self.timestamp,
            'proofHash': self.proof_hash,
            'score': self.score,
            'verified': self.verified
        }


@dataclass
class ReputationScore:
    """
    Sender reputation as computed by the external scorer.
    ``trust_level`` is taken as-is; unknown levels stay raw strings.
    """
    sender: str
    score: float  # 0-100
    trust_level: Union[TrustLevel, str]
    total_proofs: int = 0
    proof_records: List[ProofRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReputationScore":
        return cls(
            sender=data.get('sender', ''),
            score=float(data.get('score', 0.0)),
            trust_level=TrustLevel.parse(data.get('trustLevel', '')),
            total_proofs=int(data.get('totalProofs', 0)),
            proof_records=[ProofRecord.from_dict(r) for r in data.get('proofRecords') or []]
        )

    def to_dict(self) -> Dict[str, Any]:
        trust_level = self.trust_level.value if isinstance(self.trust_level, TrustLevel) else self.trust_level
        return {
            'sender': self.sender,
            'score': self.score,
            'trustLevel': trust_level,
            'totalProofs': self.total_proofs,
            'proofRecords': [r.to_dict() for r in self.proof_records]
        }


@dataclass
class LedgerStatus:
    """Ledger identity as reported by the wallet collaborator."""
    connected: bool = False
    identity: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.connected and bool(self.identity)

    def to_dict(self) -> Dict[str, Any]:
        return {'connected': self.connected, 'identity': self.identity}


@dataclass
class SubmissionReport:
    """
    Result of one submission run.

    ``outcomes`` holds one entry per malicious message (and one per message
    whose classification failed), in inbox order.
    """
    status: BatchStatus
    success_count: int = 0
    outcomes: List[SubmissionOutcome] = field(default_factory=list)
    rejection_reason: Optional[RejectionReason] = None

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "SubmissionReport":
        return cls(status=BatchStatus.BATCH_REJECTED, rejection_reason=reason)

    @property
    def errors(self) -> List[SubmissionError]:
        return [o.error for o in self.outcomes if o.error is not None]

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'success_count': self.success_count,
            'failure_count': self.failure_count,
            'rejection_reason': self.rejection_reason.value if self.rejection_reason else None,
            'outcomes': [o.to_dict() for o in self.outcomes],
            'errors': [e.to_dict() for e in self.errors]
        }
