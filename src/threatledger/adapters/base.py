"""
Collaborator interfaces consumed by the pipeline.
All concrete adapters (HTTP clients, test fakes) must inherit from these.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from ..models import (
    ClassificationResult,
    LedgerStatus,
    Message,
    ProofArtifact,
    ReputationScore,
)

logger = logging.getLogger(__name__)


class InboxProvider(ABC):
    """Source of inbox messages."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def fetch_messages(self, limit: int) -> List[Message]:
        """
        Fetch the most recent messages.

        Args:
            limit: Maximum number of messages to return

        Returns:
            Messages in inbox order

        Raises:
            Exception: Any failure; callers surface it as a fetch error
        """
        pass


class ThreatClassifier(ABC):
    """Opaque email-threat classifier."""

    @abstractmethod
    async def classify(self, message: Message) -> ClassificationResult:
        """
        Classify a single message.

        Raises:
            Exception: If classification fails (callers recover per item)
        """
        pass


class ProofService(ABC):
    """
    Proof generation and ledger submission.

    ``None`` results mean "could not produce"; both methods may also raise.
    """

    @abstractmethod
    async def generate_proof(
        self,
        message: Message,
        classification: ClassificationResult
    ) -> Optional[ProofArtifact]:
        """Build a proof attesting the classification of ``message``."""
        pass

    @abstractmethod
    async def submit(self, proof: ProofArtifact) -> Optional[str]:
        """Submit a proof to the ledger and return its confirmation identifier."""
        pass


class WalletProvider(ABC):
    """Holder of the ledger identity used to sign submissions."""

    @abstractmethod
    async def get_status(self) -> LedgerStatus:
        """Current connection state and identity."""
        pass

    @abstractmethod
    async def request_connection(self) -> None:
        """Ask the wallet to connect. Identity is read back through get_status()."""
        pass

    async def disconnect(self) -> None:
        """Release the identity. Wallets without a disconnect flow can ignore this."""
        return None


class ReputationScorer(ABC):
    """External sender reputation scorer."""

    @abstractmethod
    async def lookup(self, sender: str) -> ReputationScore:
        """
        Score a sender.

        Raises:
            Exception: If the scorer fails (propagated to the caller)
        """
        pass
