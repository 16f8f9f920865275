"""In-memory session store.

Each session owns exactly one ``CalculatorController`` plus its settings.
All input goes through the store so timestamps stay current; nothing is
persisted across process restarts.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from controller import CalculatorController, InputEvent
from models import CalculatorSettings, SessionView, StateSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionLimitError(Exception):
    """Raised when creating a session would exceed the configured limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Session limit reached ({limit})")


@dataclass
class Session:
    id: str
    controller: CalculatorController
    settings: CalculatorSettings
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def view(self) -> SessionView:
        return SessionView(
            id=self.id,
            settings=self.settings,
            state=StateSnapshot.from_state(self.controller.state),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SessionStore:
    """In-memory registry of calculator sessions."""

    def __init__(
        self,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        default_settings: CalculatorSettings | None = None,
    ) -> None:
        self.max_sessions = max_sessions
        self.default_settings = default_settings or CalculatorSettings()
        self._sessions: dict[str, Session] = {}

    # -- lifecycle -------------------------------------------------------------

    def create(self, settings: CalculatorSettings | None = None) -> Session:
        """Start a fresh calculator session."""
        if len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(self.max_sessions)

        now = _utcnow()
        session = Session(
            id=_new_id(),
            controller=CalculatorController(),
            settings=settings or self.default_settings,
            created_at=now,
            updated_at=now,
        )
        self._sessions[session.id] = session
        logger.info("Created session %s (%d active)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """List sessions, newest first."""
        items = sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)
        return items[offset : offset + limit]

    def delete(self, session_id: str) -> Session:
        """Delete a session and return it."""
        session = self.get(session_id)
        del self._sessions[session_id]
        logger.info("Deleted session %s", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        self._sessions.clear()

    # -- input -----------------------------------------------------------------

    def dispatch(self, session_id: str, events: Iterable[InputEvent]) -> Session:
        """Feed input events to a session's controller in order."""
        session = self.get(session_id)
        session.controller.replay(events)
        session.updated_at = _utcnow()
        return session

    def update_settings(self, session_id: str, settings: CalculatorSettings) -> Session:
        session = self.get(session_id)
        session.settings = settings
        session.updated_at = _utcnow()
        return session
