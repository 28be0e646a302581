"""
Dashboard REST API Endpoints
"""

import logging
from typing import Optional, Dict, Any, List

from fastapi import APIRouter, HTTPException, Depends, Query, Request
from pydantic import BaseModel

from ..exceptions import (
    CollaboratorError,
    InboxFetchError,
    InvalidSenderError,
    InvalidTransitionError,
    LedgerConnectionError,
    ReputationLookupError,
    RunInProgressError,
)
from ..inbox import InboxFilter
from ..presentation import (
    level_breakdown,
    readiness_hint,
    reputation_view,
    submission_notice,
    truncate_identity,
)
from ..session import DashboardSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])


def get_session(request: Request) -> DashboardSession:
    """Session dependency; the app factory stores it on app.state."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=500, detail="Dashboard session not initialized")
    return session


# Pydantic models for API
class InboxResponse(BaseModel):
    items: List[Dict[str, Any]]
    safe_count: int
    threat_count: int
    filter: str


class StatisticsResponse(BaseModel):
    """Threat statistics for the current message set."""
    total: int
    safe: int
    threats: int
    failed: int
    byLevel: Dict[str, int]
    byType: Dict[str, int]
    levelBreakdown: Dict[str, float]
    hint: str


class SubmissionResponse(BaseModel):
    """Result of a proof submission run."""
    status: str
    success_count: int
    failure_count: int
    rejection_reason: Optional[str]
    outcomes: List[Dict[str, Any]]
    errors: List[Dict[str, Any]]
    notice: Optional[str]


class LedgerStatusResponse(BaseModel):
    connected: bool
    identity: Optional[str]
    display_identity: str
    state: str


def _ledger_response(session: DashboardSession) -> LedgerStatusResponse:
    status = session.connection.status()
    return LedgerStatusResponse(
        connected=status.connected,
        identity=status.identity,
        display_identity=truncate_identity(status.identity),
        state=session.connection.state.value
    )


@router.get("/inbox", response_model=InboxResponse)
async def get_inbox(
    filter: InboxFilter = Query(InboxFilter.ALL),
    refresh: bool = False,
    session: DashboardSession = Depends(get_session)
):
    """
    Analyzed inbox. Fetches from the provider on first use or when ``refresh`` is set.
    """
    if refresh or not session.messages:
        try:
            await session.refresh_inbox()
        except InboxFetchError as e:
            raise HTTPException(status_code=502, detail=str(e))

    view = await session.inbox_view(filter)
    return InboxResponse(filter=filter.value, **view.to_dict())


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(session: DashboardSession = Depends(get_session)):
    """
    Compute threat statistics for the current message set.
    """
    try:
        stats = await session.compute_statistics()
    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StatisticsResponse(
        **stats.to_dict(),
        levelBreakdown=level_breakdown(stats),
        hint=readiness_hint(session.connection.status(), stats)
    )


@router.post("/proofs/submit", response_model=SubmissionResponse)
async def submit_proofs(session: DashboardSession = Depends(get_session)):
    """
    Generate and submit proofs for every malicious message.

    Always answers 200; rejected batches are reported through ``status``
    and ``rejection_reason``.
    """
    report = await session.submit_proofs()
    return SubmissionResponse(**report.to_dict(), notice=submission_notice(report))


@router.get("/ledger/status", response_model=LedgerStatusResponse)
async def get_ledger_status(session: DashboardSession = Depends(get_session)):
    try:
        await session.connection.refresh()
    except CollaboratorError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _ledger_response(session)


@router.post("/ledger/connect", response_model=LedgerStatusResponse)
async def connect_ledger(session: DashboardSession = Depends(get_session)):
    try:
        await session.connection.connect()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LedgerConnectionError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _ledger_response(session)


@router.post("/ledger/disconnect", response_model=LedgerStatusResponse)
async def disconnect_ledger(session: DashboardSession = Depends(get_session)):
    await session.connection.disconnect()
    return _ledger_response(session)


@router.get("/reputation/{sender}")
async def get_reputation(sender: str, session: DashboardSession = Depends(get_session)):
    """
    Look up a sender's reputation and its presentation.
    """
    try:
        score = await session.reputation.lookup(sender)
    except InvalidSenderError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReputationLookupError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return reputation_view(score)
