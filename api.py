"""FastAPI REST endpoints for calculator sessions.

Routes
------
POST   /sessions                 Open a session
GET    /sessions                 List sessions
GET    /sessions/{id}            Retrieve a session snapshot
DELETE /sessions/{id}            Close a session
POST   /sessions/{id}/press      Press one button
POST   /sessions/{id}/sequence   Press several buttons in order
PUT    /sessions/{id}/logging    Partially update log channel visibility
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from models import (
    ButtonPress,
    LogVisibilityUpdate,
    PressSequence,
    Session,
    SessionCreate,
)
from store import SessionNotFoundError, SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class SessionListResponse(BaseModel):
    items: list[Session]
    total: int


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=Session, status_code=201)
def create_session(payload: SessionCreate | None = None) -> Session:
    """Open a calculator session."""
    log_visibility = payload.log_visibility if payload is not None else None
    return get_store().create(log_visibility)


@router.get("", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    """List open sessions, newest first."""
    store = get_store()
    return SessionListResponse(
        items=store.list(offset=offset, limit=limit),
        total=store.count(),
    )


@router.get("/{session_id}", response_model=Session)
def get_session(session_id: str) -> Session:
    """Retrieve a session snapshot."""
    try:
        return get_store().get(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/{session_id}", response_model=Session)
def delete_session(session_id: str) -> Session:
    """Close a session and return its final snapshot."""
    try:
        return get_store().delete(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/press", response_model=Session)
def press_button(session_id: str, payload: ButtonPress) -> Session:
    """Press one button."""
    try:
        return get_store().press(session_id, payload)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/sequence", response_model=Session)
def press_sequence(session_id: str, payload: PressSequence) -> Session:
    """Press several buttons in order."""
    try:
        return get_store().press_many(session_id, payload.presses)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.put("/{session_id}/logging", response_model=Session)
def update_logging(session_id: str, payload: LogVisibilityUpdate) -> Session:
    """Partially update which log channels are shown."""
    try:
        return get_store().set_log_visibility(session_id, payload)
    except SessionNotFoundError:
        raise _not_found(session_id)
