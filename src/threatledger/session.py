"""
Dashboard session: the explicit context object that wires the pipeline
components to one set of collaborators and one current message set.
"""

import logging
from typing import Optional, Sequence, Tuple

from .adapters.base import (
    InboxProvider,
    ProofService,
    ReputationScorer,
    ThreatClassifier,
    WalletProvider,
)
from .classification import ClassificationCache
from .connection import LedgerConnectionManager
from .inbox import InboxFilter, InboxService, InboxView
from .models import Message, Statistics, SubmissionReport
from .orchestrator import SubmissionOrchestrator
from .reputation import ReputationLookup
from .statistics import ClassificationFailurePolicy, StatisticsAggregator

logger = logging.getLogger(__name__)


class DashboardSession:
    """
    Holds the current message set and the components that work on it.

    The aggregator, the orchestrator and the inbox view share one
    classify-once cache, which is invalidated whenever a new message set is
    loaded.
    """

    def __init__(
        self,
        inbox: InboxProvider,
        classifier: ThreatClassifier,
        proof_service: ProofService,
        wallet: WalletProvider,
        scorer: ReputationScorer,
        failure_policy: ClassificationFailurePolicy = ClassificationFailurePolicy.EXCLUDE,
        fetch_limit: int = 10
    ):
        self.cache = ClassificationCache(classifier)
        self.inbox = InboxService(inbox, self.cache, fetch_limit=fetch_limit)
        self.aggregator = StatisticsAggregator(self.cache, failure_policy)
        self.orchestrator = SubmissionOrchestrator(self.cache, proof_service)
        self.connection = LedgerConnectionManager(wallet)
        self.reputation = ReputationLookup(scorer)

        self._adapters = (inbox, classifier, proof_service, wallet, scorer)
        self._messages: Tuple[Message, ...] = ()
        self.statistics: Optional[Statistics] = None
        self.last_report: Optional[SubmissionReport] = None

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._messages

    def load_messages(self, messages: Sequence[Message]) -> None:
        """Replace the message set; cached classifications and statistics are dropped."""
        self._messages = tuple(messages)
        self.cache.bind(self._messages)
        self.statistics = None
        self.last_report = None
        logger.debug(f"Loaded {len(self._messages)} messages into session")

    async def refresh_inbox(self, limit: Optional[int] = None) -> Tuple[Message, ...]:
        """
        Fetch the inbox and make it the current message set.
        On failure the previous set is kept and InboxFetchError propagates.
        """
        messages = await self.inbox.fetch(limit)
        self.load_messages(messages)
        return self._messages

    async def inbox_view(self, inbox_filter: InboxFilter = InboxFilter.ALL) -> InboxView:
        return await self.inbox.view(self._messages, inbox_filter)

    async def compute_statistics(self) -> Statistics:
        self.statistics = await self.aggregator.aggregate(self._messages)
        return self.statistics

    async def submit_proofs(self) -> SubmissionReport:
        """Run the orchestrator under the current ledger identity."""
        self.last_report = await self.orchestrator.submit_all(self._messages, self.connection.status())
        return self.last_report

    async def close(self) -> None:
        """Close adapters that hold network resources (each one once)."""
        seen = set()
        for adapter in self._adapters:
            close = getattr(adapter, 'close', None)
            if close is None or id(adapter) in seen:
                continue
            seen.add(id(adapter))
            await close()
