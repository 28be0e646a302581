"""
Reputation lookup - on-demand sender trust query.
"""

import logging

from .adapters.base import ReputationScorer
from .exceptions import InvalidSenderError, ReputationLookupError
from .models import ReputationScore

logger = logging.getLogger(__name__)


class ReputationLookup:
    """
    Queries the external scorer for one sender at a time.
    No caching and no retries: every call reaches the scorer.
    """

    def __init__(self, scorer: ReputationScorer):
        self.scorer = scorer

    async def lookup(self, sender: str) -> ReputationScore:
        """
        Get the reputation of ``sender``.

        Args:
            sender: Email address or ledger address; format is not validated

        Returns:
            ReputationScore as produced by the scorer

        Raises:
            InvalidSenderError: If the identifier is empty
            ReputationLookupError: If the scorer failed
        """
        sender = (sender or "").strip()
        if not sender:
            raise InvalidSenderError("Please enter a sender address")

        try:
            score = await self.scorer.lookup(sender)
        except Exception as e:
            logger.error(f"Failed to get reputation for {sender}: {e}")
            raise ReputationLookupError(sender, str(e) or "Reputation lookup failed") from e

        logger.info(f"Reputation for {sender}: score={score.score:.0f}, trust={score.trust_level}")
        return score
