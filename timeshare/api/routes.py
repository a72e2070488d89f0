from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, HTTPException

from timeshare.ledger import IndexOutOfRange, InvalidDate, LedgerFinalized
from timeshare.models.schemas import (
    AddDateRequest,
    DateOptionOut,
    HealthResponse,
    MessageOut,
    QueryItem,
    SessionCreateRequest,
    SessionOut,
)
from timeshare.services import ComposedMessage, EventSession, MessageComposer, display_date
from timeshare.utils import get_logger

log = get_logger("api.routes")

router = APIRouter(prefix="/api", tags=["timeshare"])

# ── in-memory session store ───────────────────────────
_sessions: Dict[str, EventSession] = {}

# injected at startup from main.py
_composer: MessageComposer | None = None


def inject_dependencies(composer: MessageComposer):
    global _composer
    _composer = composer


def _get_session(session_id: str) -> EventSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _session_out(session: EventSession) -> SessionOut:
    return SessionOut(
        session_id=session.id,
        mode=session.mode,
        options=[
            DateOptionOut(
                index=i,
                date=o.date,
                display=display_date(o.date),
                aggregate_votes=o.aggregate_votes,
                local_vote=o.local_vote,
            )
            for i, o in enumerate(session.ledger)
        ],
        closed=session.closed,
    )


def _message_out(session_id: str, message: ComposedMessage) -> MessageOut:
    return MessageOut(
        session_id=session_id,
        url=message.url,
        caption=message.caption,
        query_items=[QueryItem(name=k, value=v) for k, v in message.payload],
        preview_lines=message.preview_lines,
        image_svg=message.image_svg,
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  POST /api/sessions — open a ledger, optionally from a received message
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/sessions", response_model=SessionOut, status_code=201)
async def create_session(req: SessionCreateRequest):
    """Start editing; a message URL loads its dates and tallies."""
    if _composer is None:
        raise HTTPException(status_code=503, detail="Composer not initialised yet")

    session = EventSession(on_save=_composer.compose, message_url=req.message_url)
    _sessions[session.id] = session
    log.info("POST /api/sessions  session=%s  options=%d", session.id, len(session.ledger))
    return _session_out(session)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  GET /api/sessions/{session_id}
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/sessions/{session_id}", response_model=SessionOut)
async def get_session(session_id: str):
    return _session_out(_get_session(session_id))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  POST /api/sessions/{session_id}/dates
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/sessions/{session_id}/dates", response_model=SessionOut)
async def add_date(session_id: str, req: AddDateRequest):
    """Propose another date; the proposer's vote is pre-ticked."""
    session = _get_session(session_id)
    try:
        session.add_date(req.date)
    except InvalidDate as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except LedgerFinalized as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _session_out(session)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  POST /api/sessions/{session_id}/votes/{index}/toggle
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/sessions/{session_id}/votes/{index}/toggle", response_model=SessionOut)
async def toggle_vote(session_id: str, index: int):
    session = _get_session(session_id)
    try:
        session.toggle_vote(index)
    except IndexOutOfRange as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except LedgerFinalized as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _session_out(session)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  POST /api/sessions/{session_id}/send
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/sessions/{session_id}/send", response_model=MessageOut)
async def send(session_id: str):
    """Fold the local votes in and compose the outgoing message."""
    session = _get_session(session_id)
    try:
        message = session.save()
    except LedgerFinalized as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _message_out(session_id, message)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  DELETE /api/sessions/{session_id}
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """Discard a session."""
    _get_session(session_id)
    _sessions.pop(session_id)
    log.info("Session %s cleared", session_id)
    return {"message": "Session cleared"}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  GET /api/health
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", sessions=len(_sessions))
