"""FastAPI REST endpoints for calculator sessions.

Routes
------
POST   /sessions                          Start a session
GET    /sessions                          List sessions
GET    /sessions/{id}                     Session with state snapshot
DELETE /sessions/{id}                     End a session
GET    /sessions/{id}/display             Current display
POST   /sessions/{id}/digits              Press a digit
POST   /sessions/{id}/decimal             Press the decimal point
POST   /sessions/{id}/operations          Press an operator key
POST   /sessions/{id}/events              Replay a sequence of key presses
PUT    /sessions/{id}/settings            Replace settings
POST   /sessions/{id}/settings/toggle-theme   Switch light/dark
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from controller import InputEvent
from errors import InvalidDisplayStateError
from models import (
    CalculatorSettings,
    DigitInput,
    DisplayResponse,
    EventBatch,
    OperationInput,
    SessionCreate,
    SessionView,
)
from store import Session, SessionLimitError, SessionNotFoundError, SessionStore

logger = logging.getLogger(__name__)

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
    items: list[SessionView]
    total: int


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _display(session: Session) -> DisplayResponse:
    return DisplayResponse(
        display=session.controller.current_display,
        has_error=session.controller.has_error(),
    )


def _press(session_id: str, *events: InputEvent) -> DisplayResponse:
    try:
        return _display(get_store().dispatch(session_id, events))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except InvalidDisplayStateError as e:
        logger.exception("Corrupt display in session %s", session_id)
        raise HTTPException(status_code=500, detail="Internal calculator error") from e


# ---------------------------------------------------------------------------
# Session endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=SessionView, status_code=201)
def create_session(payload: SessionCreate | None = None) -> SessionView:
    """Start a new calculator session."""
    settings = payload.settings if payload else None
    try:
        return get_store().create(settings).view()
    except SessionLimitError as e:
        raise HTTPException(status_code=429, detail=str(e)) from e


@router.get("", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    items = [s.view() for s in store.list(offset=offset, limit=limit)]
    return SessionListResponse(items=items, total=store.count())


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    try:
        return get_store().get(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    """End a session and return its final state."""
    try:
        return get_store().delete(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


# ---------------------------------------------------------------------------
# Input endpoints
# ---------------------------------------------------------------------------

@router.get("/{session_id}/display", response_model=DisplayResponse)
def get_display(session_id: str) -> DisplayResponse:
    try:
        return _display(get_store().get(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/digits", response_model=DisplayResponse)
def press_digit(session_id: str, payload: DigitInput) -> DisplayResponse:
    return _press(session_id, InputEvent.digit_pressed(payload.digit))


@router.post("/{session_id}/decimal", response_model=DisplayResponse)
def press_decimal(session_id: str) -> DisplayResponse:
    return _press(session_id, InputEvent.decimal_pressed())


@router.post("/{session_id}/operations", response_model=DisplayResponse)
def press_operation(session_id: str, payload: OperationInput) -> DisplayResponse:
    return _press(session_id, InputEvent.operator_pressed(payload.operation))


@router.post("/{session_id}/events", response_model=DisplayResponse)
def replay_events(session_id: str, payload: EventBatch) -> DisplayResponse:
    """Apply key presses in order and return the final display."""
    return _press(session_id, *(e.to_event() for e in payload.events))


# ---------------------------------------------------------------------------
# Settings endpoints
# ---------------------------------------------------------------------------

@router.put("/{session_id}/settings", response_model=CalculatorSettings)
def update_settings(session_id: str, payload: CalculatorSettings) -> CalculatorSettings:
    try:
        return get_store().update_settings(session_id, payload).settings
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/settings/toggle-theme", response_model=CalculatorSettings)
def toggle_theme(session_id: str) -> CalculatorSettings:
    store = get_store()
    try:
        current = store.get(session_id).settings
        return store.update_settings(session_id, current.toggled()).settings
    except SessionNotFoundError:
        raise _not_found(session_id)
