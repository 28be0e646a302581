"""
Adapters for the external inbox, classifier, ledger and reputation services.
"""

from .base import (
    InboxProvider,
    ThreatClassifier,
    ProofService,
    WalletProvider,
    ReputationScorer
)
from .http import (
    ServiceClient,
    HttpInboxProvider,
    HttpThreatClassifier,
    HttpProofService,
    HttpWalletProvider,
    HttpReputationScorer
)

__all__ = [
    'InboxProvider',
    'ThreatClassifier',
    'ProofService',
    'WalletProvider',
    'ReputationScorer',
    'ServiceClient',
    'HttpInboxProvider',
    'HttpThreatClassifier',
    'HttpProofService',
    'HttpWalletProvider',
    'HttpReputationScorer',
]
