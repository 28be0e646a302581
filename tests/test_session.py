"""
Inbox view, classification cache and session wiring tests
"""

from unittest.mock import AsyncMock

import pytest

from threatledger.classification import ClassificationCache
from threatledger.exceptions import InboxFetchError, InvalidClassificationError
from threatledger.inbox import InboxFilter, InboxService
from threatledger.models import BatchStatus, EventType, RejectionReason, ThreatLevel
from threatledger.session import DashboardSession

from conftest import FakeClassifier, FakeInbox, make_message, threat


class TestClassificationCache:

    @pytest.mark.asyncio
    async def test_classifies_once(self, classifier, messages):
        cache = ClassificationCache(classifier)
        cache.bind(messages)
        first = await cache.classify(messages[1])
        second = await cache.classify(messages[1])

        assert first is second
        assert classifier.calls == ['m2']

    @pytest.mark.asyncio
    async def test_rebinding_new_set_invalidates(self, classifier, messages):
        cache = ClassificationCache(classifier)
        cache.bind(messages)
        await cache.classify(messages[0])

        cache.bind(messages[:3])
        assert len(cache) == 0
        await cache.classify(messages[0])
        assert classifier.calls == ['m1', 'm1']

    @pytest.mark.asyncio
    async def test_rebinding_same_set_keeps_results(self, classifier, messages):
        cache = ClassificationCache(classifier)
        cache.bind(messages)
        await cache.classify(messages[0])
        cache.bind(list(messages))

        assert cache.get('m1') is not None

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, messages):
        classifier = FakeClassifier({'m1': RuntimeError("timeout")})
        cache = ClassificationCache(classifier)

        for _ in range(2):
            with pytest.raises(RuntimeError):
                await cache.classify(messages[0])
        assert classifier.calls == ['m1', 'm1']
        assert cache.get('m1') is None


    @pytest.mark.asyncio
    async def test_missing_verdict_is_rejected_and_not_cached(self, messages):
        classifier = FakeClassifier({'m1': None})
        cache = ClassificationCache(classifier)

        with pytest.raises(InvalidClassificationError, match="m1"):
            await cache.classify(messages[0])
        assert cache.get('m1') is None

class TestInboxService:

    @pytest.mark.asyncio
    async def test_fetch_uses_default_limit(self, classifier, messages):
        inbox = FakeInbox(messages)
        service = InboxService(inbox, ClassificationCache(classifier), fetch_limit=3)

        fetched = await service.fetch()

        assert inbox.limits == [3]
        assert [m.id for m in fetched] == ['m1', 'm2', 'm3']

    @pytest.mark.asyncio
    async def test_explicit_zero_limit_is_kept(self, classifier, messages):
        inbox = FakeInbox(messages)
        service = InboxService(inbox, ClassificationCache(classifier), fetch_limit=3)

        fetched = await service.fetch(0)

        assert inbox.limits == [0]
        assert fetched == []

    @pytest.mark.asyncio
    async def test_fetch_failure_wrapped(self, classifier):
        service = InboxService(FakeInbox([], error=ConnectionError("mailbox offline")), ClassificationCache(classifier))

        with pytest.raises(InboxFetchError, match="mailbox offline"):
            await service.fetch()

    @pytest.mark.asyncio
    async def test_fetch_failure_default_message(self, classifier):
        service = InboxService(FakeInbox([], error=RuntimeError()), ClassificationCache(classifier))

        with pytest.raises(InboxFetchError, match="Failed to fetch emails"):
            await service.fetch()

    @pytest.mark.asyncio
    async def test_filters(self, classifier, messages):
        service = InboxService(FakeInbox(messages), ClassificationCache(classifier))

        everything = await service.view(messages, InboxFilter.ALL)
        safe = await service.view(messages, InboxFilter.SAFE)
        threats = await service.view(messages, "threats")

        assert len(everything.items) == 5
        assert [i.message.id for i in safe.items] == ['m1', 'm3', 'm5']
        assert [i.message.id for i in threats.items] == ['m2', 'm4']
        assert threats.safe_count == 3
        assert threats.threat_count == 2

    @pytest.mark.asyncio
    async def test_failed_analysis_is_in_neither_count(self, messages):
        classifier = FakeClassifier({'m1': RuntimeError("boom"), 'm2': threat(ThreatLevel.LOW, EventType.SPAM)})
        service = InboxService(FakeInbox(messages), ClassificationCache(classifier))

        view = await service.view(messages)

        assert view.items[0].analysis is None
        assert view.safe_count == 3
        assert view.threat_count == 1
        assert view.to_dict()['items'][0]['analysis'] is None


class TestDashboardSession:

    @pytest.mark.asyncio
    async def test_statistics_then_submission(self, session):
        """Five messages, two threats, both proofs accepted."""
        await session.refresh_inbox()
        stats = await session.compute_statistics()
        assert (stats.total, stats.safe_count, stats.threat_count) == (5, 3, 2)

        await session.connection.connect()
        report = await session.submit_proofs()

        assert report.status == BatchStatus.ALL_SUCCEEDED
        assert report.success_count == 2
        assert report.errors == []
        assert session.last_report is report

    @pytest.mark.asyncio
    async def test_submission_without_identity(self, session, proof_service):
        await session.refresh_inbox()
        stats = await session.compute_statistics()

        report = await session.submit_proofs()

        assert report.rejection_reason == RejectionReason.NOT_READY
        assert proof_service.generated == []
        assert session.statistics == stats

    @pytest.mark.asyncio
    async def test_single_classification_per_message(self, session, classifier):
        await session.refresh_inbox()
        await session.inbox_view()
        await session.compute_statistics()
        await session.connection.connect()
        await session.submit_proofs()

        assert classifier.calls == ['m1', 'm2', 'm3', 'm4', 'm5']

    @pytest.mark.asyncio
    async def test_new_message_set_reclassifies(self, session, classifier):
        await session.refresh_inbox()
        await session.compute_statistics()

        session.load_messages([make_message("m1"), make_message("m9")])
        stats = await session.compute_statistics()

        assert stats.total == 2
        assert classifier.calls[-2:] == ['m1', 'm9']

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_set(self, classifier, proof_service, wallet, scorer, messages):
        inbox = FakeInbox(messages)
        session = DashboardSession(inbox, classifier, proof_service, wallet, scorer)
        await session.refresh_inbox()

        inbox.error = ConnectionError("offline")
        with pytest.raises(InboxFetchError):
            await session.refresh_inbox()

        assert len(session.messages) == 5

    @pytest.mark.asyncio
    async def test_close_closes_each_adapter_once(self, classifier, wallet, scorer, messages):
        inbox = FakeInbox(messages)
        inbox.close = AsyncMock()
        classifier.close = AsyncMock()
        session = DashboardSession(inbox, classifier, inbox, wallet, scorer)

        await session.close()

        inbox.close.assert_awaited_once()
        classifier.close.assert_awaited_once()
