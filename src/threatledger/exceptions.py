"""
Exception hierarchy for the dashboard backend.
"""

from typing import Optional


class ThreatLedgerError(Exception):
    """Base class for all errors raised by threatledger."""


class CollaboratorError(ThreatLedgerError):
    """An external service (inbox, classifier, ledger, scorer) failed at the transport or HTTP level."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.service = service
        self.status_code = status_code


class InboxFetchError(ThreatLedgerError):
    """The inbox could not be fetched. Retry is a manual re-invocation."""


class LedgerConnectionError(ThreatLedgerError):
    """Requesting a ledger identity failed or finished without one."""


class InvalidTransitionError(ThreatLedgerError):
    """A connection state change was requested from a state that does not allow it."""


class RunInProgressError(ThreatLedgerError):
    """An operation was started while a previous run of it is still active."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} is already running")
        self.operation = operation


class InvalidSenderError(ThreatLedgerError, ValueError):
    """A reputation lookup was requested with an empty sender identifier."""


class ReputationLookupError(ThreatLedgerError):
    """The reputation scorer failed for a sender."""

    def __init__(self, sender: str, message: str):
        super().__init__(message)
        self.sender = sender


class InvalidClassificationError(ThreatLedgerError):
    """The classifier answered with something that is not a usable verdict."""
