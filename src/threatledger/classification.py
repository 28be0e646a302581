"""
Classify-once cache shared by the aggregator, the orchestrator and the inbox view.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .adapters.base import ThreatClassifier
from .exceptions import InvalidClassificationError
from .models import ClassificationResult, EventType, Message, ThreatLevel

logger = logging.getLogger(__name__)


class ClassificationCache:
    """
    Caches classifier results keyed by message id.

    The cache is bound to one message set. Binding a different set (by ids,
    in order) drops every cached result. Failed classifications are not
    cached, so the next consumer asks the classifier again.
    """

    def __init__(self, classifier: ThreatClassifier):
        self.classifier = classifier
        self._results: Dict[str, ClassificationResult] = {}
        self._fingerprint: Optional[Tuple[str, ...]] = None

    def bind(self, messages: Iterable[Message]) -> None:
        """Attach the cache to a message set, invalidating it if the set changed."""
        fingerprint = tuple(m.id for m in messages)
        if fingerprint != self._fingerprint:
            if self._results:
                logger.debug(f"Message set changed, dropping {len(self._results)} cached classifications")
            self._results.clear()
            self._fingerprint = fingerprint

    def invalidate(self) -> None:
        self._results.clear()
        self._fingerprint = None

    def get(self, message_id: str) -> Optional[ClassificationResult]:
        return self._results.get(message_id)

    def __len__(self) -> int:
        return len(self._results)

    async def classify(self, message: Message) -> ClassificationResult:
        """
        Return the cached result for ``message`` or ask the classifier.

        Raises:
            InvalidClassificationError: If the classifier returned no usable verdict
            Exception: Whatever the classifier raised; nothing is cached then
        """
        cached = self._results.get(message.id)
        if cached is not None:
            return cached

        result = await self.classifier.classify(message)
        _check_verdict(message, result)
        self._results[message.id] = result
        return result


def _check_verdict(message: Message, result: object) -> None:
    """Reject verdicts the counters and the proof service cannot use."""
    if not isinstance(result, ClassificationResult):
        raise InvalidClassificationError(
            f"Classifier returned {type(result).__name__} for message {message.id}"
        )
    if not isinstance(result.threat_level, ThreatLevel) or not isinstance(result.event_type, EventType):
        raise InvalidClassificationError(
            f"Classifier returned an unknown threat level or event type for message {message.id}"
        )
