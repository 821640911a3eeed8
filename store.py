"""In-memory calculator session store.

Each session owns one Calculator and one CalcLogger.  All button presses
from the HTTP host go through the store, which keeps timestamp
bookkeeping and renders Session snapshots.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

from calculator import Calculator
from calclog import CalcLogger
from models import (
    ButtonPress,
    CalculatorState,
    LogVisibilityState,
    LogVisibilityUpdate,
    Session,
    _new_id,
    _utcnow,
)

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


@dataclass
class _Entry:
    calc: Calculator
    created_at: datetime
    updated_at: datetime
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, _Entry] = {}

    # -- helpers -------------------------------------------------------------

    def _entry(self, session_id: str) -> _Entry:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def _snapshot(self, session_id: str, entry: _Entry) -> Session:
        return Session(
            id=session_id,
            state=CalculatorState.from_calculator(entry.calc),
            log_visibility=LogVisibilityState.from_logger(entry.calc.log),
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

    # -- sessions ------------------------------------------------------------

    def create(self, log_visibility: LogVisibilityUpdate | None = None) -> Session:
        """Open a session with a calculator in its initial state."""
        session_id = _new_id()
        log = CalcLogger(session_id=session_id)
        if log_visibility is not None:
            log_visibility.apply(log)
        now = _utcnow()
        entry = _Entry(calc=Calculator(log=log), created_at=now, updated_at=now)
        self._sessions[session_id] = entry
        logger.info("Opened calculator session %s", session_id)
        return self._snapshot(session_id, entry)

    def get(self, session_id: str) -> Session:
        return self._snapshot(session_id, self._entry(session_id))

    def calculator(self, session_id: str) -> Calculator:
        """Return the live Calculator behind a session."""
        return self._entry(session_id).calc

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """List sessions, newest first."""
        items = list(reversed(self._sessions.items()))
        return [self._snapshot(sid, e) for sid, e in items[offset : offset + limit]]

    def press(self, session_id: str, press: ButtonPress) -> Session:
        """Apply one button press to a session."""
        return self.press_many(session_id, [press])

    def press_many(self, session_id: str, presses: list[ButtonPress]) -> Session:
        """Apply button presses to a session in order, as one atomic step."""
        entry = self._entry(session_id)
        with entry.lock:
            for p in presses:
                p.apply(entry.calc)
            entry.updated_at = _utcnow()
            return self._snapshot(session_id, entry)

    def set_log_visibility(
        self, session_id: str, update: LogVisibilityUpdate
    ) -> Session:
        """Partially update a session's log channel visibility."""
        entry = self._entry(session_id)
        with entry.lock:
            update.apply(entry.calc.log)
            entry.updated_at = _utcnow()
            return self._snapshot(session_id, entry)

    def delete(self, session_id: str) -> Session:
        """Close a session and return its final snapshot."""
        snapshot = self.get(session_id)
        del self._sessions[session_id]
        logger.info("Closed calculator session %s", session_id)
        return snapshot

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        self._sessions.clear()
