"""
ThreatLedger - threat statistics and ledger proof submission for an inbox dashboard.
"""

from .__version__ import __version__
from .models import (
    Message,
    Attachment,
    ClassificationResult,
    ProofArtifact,
    Statistics,
    SubmissionError,
    SubmissionOutcome,
    SubmissionReport,
    ReputationScore,
    ProofRecord,
    LedgerStatus,
    ThreatLevel,
    EventType,
    TrustLevel,
    BatchStatus,
    RejectionReason,
    SubmissionStage
)
from .classification import ClassificationCache
from .statistics import StatisticsAggregator, ClassificationFailurePolicy
from .orchestrator import SubmissionOrchestrator
from .reputation import ReputationLookup
from .connection import LedgerConnectionManager, ConnectionState
from .session import DashboardSession

__all__ = [
    '__version__',
    'Message',
    'Attachment',
    'ClassificationResult',
    'ProofArtifact',
    'Statistics',
    'SubmissionError',
    'SubmissionOutcome',
    'SubmissionReport',
    'ReputationScore',
    'ProofRecord',
    'LedgerStatus',
    'ThreatLevel',
    'EventType',
    'TrustLevel',
    'BatchStatus',
    'RejectionReason',
    'SubmissionStage',
    'ClassificationCache',
    'StatisticsAggregator',
    'ClassificationFailurePolicy',
    'SubmissionOrchestrator',
    'ReputationLookup',
    'LedgerConnectionManager',
    'ConnectionState',
    'DashboardSession',
]
