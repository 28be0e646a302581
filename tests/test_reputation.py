"""
Reputation Lookup and presentation tests
"""

import pytest

from threatledger.exceptions import InvalidSenderError, ReputationLookupError
from threatledger.models import ProofRecord, ReputationScore, TrustLevel
from threatledger.presentation import (
    CLEAN_RECORD_MESSAGE,
    describe_trust_level,
    reputation_view,
)
from threatledger.reputation import ReputationLookup

from conftest import FakeScorer


def dangerous_score():
    return ReputationScore(
        sender="spam@malicious.net",
        score=12.4,
        trust_level=TrustLevel.DANGEROUS,
        total_proofs=2,
        proof_records=[
            ProofRecord(event_type="Spam", timestamp="2026-09-30T12:00:00Z", proof_hash="ab12", score=10, verified=True),
            ProofRecord(event_type="Phishing", timestamp="2026-10-02T08:00:00Z", proof_hash="cd34", score=5),
        ]
    )


class TestReputationLookup:

    @pytest.mark.asyncio
    async def test_returns_scorer_result(self):
        scorer = FakeScorer({'spam@malicious.net': dangerous_score()})
        score = await ReputationLookup(scorer).lookup('spam@malicious.net')

        assert score.trust_level == TrustLevel.DANGEROUS
        assert score.total_proofs == 2

    @pytest.mark.asyncio
    async def test_strips_identifier(self, scorer):
        await ReputationLookup(scorer).lookup('  security@mailchain.com  ')
        assert scorer.calls == ['security@mailchain.com']

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sender", ["", "   ", None])
    async def test_empty_sender_rejected(self, scorer, sender):
        with pytest.raises(InvalidSenderError):
            await ReputationLookup(scorer).lookup(sender)
        assert scorer.calls == []

    @pytest.mark.asyncio
    async def test_scorer_failure_propagates(self):
        scorer = FakeScorer({'x@y.com': RuntimeError("scorer unavailable")})

        with pytest.raises(ReputationLookupError, match="scorer unavailable") as exc_info:
            await ReputationLookup(scorer).lookup('x@y.com')
        assert exc_info.value.sender == 'x@y.com'

    @pytest.mark.asyncio
    async def test_no_caching(self, scorer):
        lookup = ReputationLookup(scorer)
        await lookup.lookup('a@b.com')
        await lookup.lookup('a@b.com')

        assert scorer.calls == ['a@b.com', 'a@b.com']


class TestTrustPresentation:

    @pytest.mark.parametrize("level,label,tone", [
        (TrustLevel.TRUSTED, "Trusted", "success"),
        (TrustLevel.NEUTRAL, "Neutral", "info"),
        (TrustLevel.SUSPICIOUS, "Suspicious", "warning"),
        (TrustLevel.DANGEROUS, "Dangerous", "danger"),
    ])
    def test_known_levels(self, level, label, tone):
        presentation = describe_trust_level(level)

        assert presentation.label == label
        assert presentation.tone == tone
        assert presentation.recommendation

    def test_raw_string_level(self):
        assert describe_trust_level("Trusted").label == "Trusted"

    @pytest.mark.parametrize("level", ["Quarantined", "", None])
    def test_unknown_level_falls_back(self, level):
        presentation = describe_trust_level(level)

        assert presentation.label == "Unknown"
        assert presentation.badge == "? Unknown"
        assert presentation.tone == "neutral"

    def test_unknown_level_keeps_raw_value(self):
        assert describe_trust_level("Quarantined").level == "Quarantined"

    def test_unknown_level_survives_parsing(self):
        score = ReputationScore.from_dict({'sender': 'a@b.com', 'score': 40, 'trustLevel': 'Quarantined'})

        assert score.trust_level == "Quarantined"
        assert describe_trust_level(score.trust_level).label == "Unknown"


class TestReputationView:

    def test_sender_with_history(self):
        view = reputation_view(dangerous_score())

        assert view['score'] == 12
        assert view['confidence'] == 95
        assert view['trust']['label'] == "Dangerous"
        assert len(view['proof_history']) == 2
        assert view['history_message'] is None

    def test_clean_sender(self):
        view = reputation_view(ReputationScore(sender="security@mailchain.com", score=98.0,
                                               trust_level=TrustLevel.TRUSTED))

        assert view['confidence'] == 50
        assert view['proof_history'] == []
        assert view['history_message'] == CLEAN_RECORD_MESSAGE
