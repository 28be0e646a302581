"""
Inbox view: fetches messages and pairs each with its classification.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .adapters.base import InboxProvider
from .classification import ClassificationCache
from .exceptions import InboxFetchError
from .models import ClassificationResult, Message

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch emails"


class InboxFilter(str, Enum):
    ALL = "all"
    SAFE = "safe"
    THREATS = "threats"


@dataclass
class AnalyzedMessage:
    """A message and its analysis; ``analysis`` is None when classification failed."""
    message: Message
    analysis: Optional[ClassificationResult] = None

    @property
    def is_safe(self) -> bool:
        return self.analysis is not None and not self.analysis.is_malicious

    @property
    def is_threat(self) -> bool:
        return self.analysis is not None and self.analysis.is_malicious

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message.to_dict(),
            'analysis': self.analysis.to_dict() if self.analysis else None
        }


@dataclass
class InboxView:
    items: List[AnalyzedMessage] = field(default_factory=list)
    safe_count: int = 0
    threat_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'safe_count': self.safe_count,
            'threat_count': self.threat_count
        }


class InboxService:
    """Fetches the inbox and builds filtered, analyzed views of it."""

    def __init__(self, provider: InboxProvider, cache: ClassificationCache, fetch_limit: int = 10):
        self.provider = provider
        self.cache = cache
        self.fetch_limit = fetch_limit

    async def fetch(self, limit: Optional[int] = None) -> List[Message]:
        """
        Fetch messages from the provider.

        Raises:
            InboxFetchError: On any provider failure
        """
        if limit is None:
            limit = self.fetch_limit
        try:
            messages = await self.provider.fetch_messages(limit)
        except InboxFetchError:
            raise
        except Exception as e:
            logger.error(f"❌ Error fetching emails: {e}")
            raise InboxFetchError(str(e) or FETCH_FAILED) from e

        logger.info(f"✅ Fetched {len(messages)} emails")
        return list(messages)

    async def view(
        self,
        messages: Sequence[Message],
        inbox_filter: InboxFilter = InboxFilter.ALL
    ) -> InboxView:
        """
        Analyze ``messages`` and apply ``inbox_filter``.

        Counts cover the whole inbox regardless of the filter. Messages whose
        classification failed appear under ``all`` only.
        """
        self.cache.bind(messages)
        analyzed = []
        for message in messages:
            try:
                analysis = await self.cache.classify(message)
            except Exception as e:
                logger.error(f"Failed to analyze email {message.id}: {e}")
                analysis = None
            analyzed.append(AnalyzedMessage(message=message, analysis=analysis))

        inbox_filter = InboxFilter(inbox_filter)
        if inbox_filter == InboxFilter.SAFE:
            items = [a for a in analyzed if a.is_safe]
        elif inbox_filter == InboxFilter.THREATS:
            items = [a for a in analyzed if a.is_threat]
        else:
            items = analyzed

        return InboxView(
            items=items,
            safe_count=sum(1 for a in analyzed if a.is_safe),
            threat_count=sum(1 for a in analyzed if a.is_threat)
        )
