"""
Shared fixtures: in-memory collaborators and a five-message inbox.
"""

from typing import Dict, List, Optional, Union

import pytest

from threatledger.adapters.base import (
    InboxProvider,
    ProofService,
    ReputationScorer,
    ThreatClassifier,
    WalletProvider,
)
from threatledger.models import (
    ClassificationResult,
    EventType,
    LedgerStatus,
    Message,
    ProofArtifact,
    ReputationScore,
    ThreatLevel,
)
from threatledger.session import DashboardSession

SAFE = ClassificationResult(is_malicious=False, threat_level=ThreatLevel.SAFE, confidence=0.1)


def threat(level: ThreatLevel, event_type: EventType) -> ClassificationResult:
    return ClassificationResult(
        is_malicious=True,
        threat_level=level,
        event_type=event_type,
        confidence=0.9,
        detected_keywords=["verify your account"],
        reasons=["urgent credential request"]
    )


def make_message(message_id: str, sender: Optional[str] = None) -> Message:
    return Message(
        id=message_id,
        sender=sender or f"{message_id}@example.com",
        to=("me@example.com",),
        subject=f"Subject {message_id}",
        body="Hello",
        date="2026-10-01T10:00:00Z"
    )


class FakeInbox(InboxProvider):
    def __init__(self, messages: List[Message], error: Optional[Exception] = None):
        self.messages = messages
        self.error = error
        self.limits: List[int] = []

    async def fetch_messages(self, limit: int) -> List[Message]:
        self.limits.append(limit)
        if self.error:
            raise self.error
        return self.messages[:limit]


class FakeClassifier(ThreatClassifier):
    """Returns a fixed verdict per message id (SAFE by default); exceptions are raised."""

    def __init__(self, verdicts: Optional[Dict[str, Union[ClassificationResult, Exception]]] = None):
        self.verdicts = verdicts or {}
        self.calls: List[str] = []

    async def classify(self, message: Message) -> ClassificationResult:
        self.calls.append(message.id)
        verdict = self.verdicts.get(message.id, SAFE)
        if isinstance(verdict, Exception):
            raise verdict
        return verdict


class FakeProofService(ProofService):
    """
    Proofs and signatures keyed by message id. A configured ``None`` means
    "could not produce"; a configured exception is raised.
    """

    def __init__(self, proofs=None, signatures=None):
        self.proofs = proofs or {}
        self.signatures = signatures or {}
        self.generated: List[str] = []
        self.submitted: List[str] = []

    async def generate_proof(self, message, classification):
        self.generated.append(message.id)
        if message.id in self.proofs:
            result = self.proofs[message.id]
            if isinstance(result, Exception):
                raise result
            if result is None:
                return None
        return ProofArtifact(
            proof_bytes=b"proof-" + message.id.encode(),
            public_inputs={
                'messageId': message.id,
                'eventType': classification.event_type.value,
                'timestamp': 1760000000
            }
        )

    async def submit(self, proof):
        message_id = proof.public_inputs['messageId']
        self.submitted.append(message_id)
        result = self.signatures.get(message_id, f"sig-{message_id}")
        if isinstance(result, Exception):
            raise result
        return result


class FakeWallet(WalletProvider):
    def __init__(self, identity: Optional[str] = None, connect_identity: Optional[str] = None,
                 connect_error: Optional[Exception] = None):
        self.identity = identity
        self.connect_identity = connect_identity
        self.connect_error = connect_error
        self.disconnects = 0

    async def get_status(self) -> LedgerStatus:
        return LedgerStatus(connected=self.identity is not None, identity=self.identity)

    async def request_connection(self) -> None:
        if self.connect_error:
            raise self.connect_error
        self.identity = self.connect_identity

    async def disconnect(self) -> None:
        self.disconnects += 1
        self.identity = None


class FakeScorer(ReputationScorer):
    def __init__(self, scores: Optional[Dict[str, Union[ReputationScore, Exception]]] = None):
        self.scores = scores or {}
        self.calls: List[str] = []

    async def lookup(self, sender: str) -> ReputationScore:
        self.calls.append(sender)
        result = self.scores.get(sender)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return ReputationScore(sender=sender, score=50.0, trust_level="Neutral")
        return result


@pytest.fixture
def messages() -> List[Message]:
    return [make_message(f"m{i}") for i in range(1, 6)]


@pytest.fixture
def classifier() -> FakeClassifier:
    """m2 is Critical phishing, m4 is Medium spam, the rest are safe."""
    return FakeClassifier({
        'm2': threat(ThreatLevel.CRITICAL, EventType.PHISHING),
        'm4': threat(ThreatLevel.MEDIUM, EventType.SPAM),
    })


@pytest.fixture
def proof_service() -> FakeProofService:
    return FakeProofService()


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet(connect_identity="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")


@pytest.fixture
def scorer() -> FakeScorer:
    return FakeScorer()


@pytest.fixture
def session(messages, classifier, proof_service, wallet, scorer) -> DashboardSession:
    return DashboardSession(
        inbox=FakeInbox(messages),
        classifier=classifier,
        proof_service=proof_service,
        wallet=wallet,
        scorer=scorer
    )
