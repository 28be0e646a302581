"""
Statistics aggregator: per-level and per-type threat counters over a message set.
"""

import logging
from enum import Enum
from typing import Sequence

from .classification import ClassificationCache
from .models import Message, Statistics
from .run_state import RunGuard

logger = logging.getLogger(__name__)


class ClassificationFailurePolicy(str, Enum):
    """How a message whose classification failed is counted."""
    EXCLUDE = "exclude"                  # counted in total, in neither safe nor threats
    OMIT_FROM_TOTAL = "omit_from_total"  # not counted in total either


class StatisticsAggregator:
    """
    Walks a message set, classifies every message and builds one Statistics value.

    Every message is processed even when classification fails for some of
    them; failures only show up in ``failed_count``.
    """

    def __init__(
        self,
        cache: ClassificationCache,
        failure_policy: ClassificationFailurePolicy = ClassificationFailurePolicy.EXCLUDE
    ):
        """
        Initialize the aggregator.

        Args:
            cache: Classify-once cache shared with the orchestrator
            failure_policy: Counting rule for failed classifications
        """
        self.cache = cache
        self.failure_policy = ClassificationFailurePolicy(failure_policy)
        self.guard = RunGuard("statistics aggregation")

    async def aggregate(self, messages: Sequence[Message]) -> Statistics:
        """
        Build statistics for ``messages``.

        Args:
            messages: Inbox messages, in order

        Returns:
            Freshly computed Statistics

        Raises:
            RunInProgressError: If an aggregation is already running
        """
        with self.guard.run():
            self.cache.bind(messages)
            stats = Statistics()

            for message in messages:
                try:
                    analysis = await self.cache.classify(message)
                except Exception as e:
                    logger.warning(f"Classification failed for message {message.id}: {e}")
                    stats.failed_count += 1
                    if self.failure_policy == ClassificationFailurePolicy.EXCLUDE:
                        stats.total += 1
                    continue

                stats.total += 1
                if analysis.is_malicious:
                    stats.threat_count += 1
                    stats.by_level[analysis.threat_level] += 1
                    stats.by_type[analysis.event_type] += 1
                else:
                    stats.safe_count += 1

            logger.info(
                f"Aggregated {len(messages)} messages: total={stats.total}, "
                f"safe={stats.safe_count}, threats={stats.threat_count}, failed={stats.failed_count}"
            )
            return stats
