"""Session store abstraction and in-memory implementation."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Iterable

from virtual_agent.dialogue.state import DialogueState
from virtual_agent.sessions.models import ChatSession
from virtual_agent.responders.base import ChatMode

logger = logging.getLogger("va.sessions")


class SessionStore(ABC):
    """Abstract interface for holding chat sessions."""

    @abstractmethod
    def create(self, mode: ChatMode, state: DialogueState, session_id: str | None = None) -> ChatSession:
        """Register a fresh session."""

    @abstractmethod
    def get(self, session_id: str) -> ChatSession | None:
        """Return the session or ``None`` when unknown."""

    @abstractmethod
    def discard(self, session_id: str) -> bool:
        """Drop a session; return whether it existed."""

    @abstractmethod
    def iter_sessions(self) -> Iterable[str]:
        """Iterate over known session identifiers."""


class InMemorySessionStore(SessionStore):
    """Process-local session map with idle expiry and a size cap.

    Sessions untouched for ``idle_ttl_seconds`` are dropped, and once
    ``max_sessions`` is exceeded the least recently used idle sessions go
    first. Busy sessions are never evicted.
    """

    def __init__(
        self,
        *,
        max_sessions: int | None = None,
        idle_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: OrderedDict[str, ChatSession] = OrderedDict()
        self._last_seen: dict[str, float] = {}
        self._max_sessions = max_sessions
        self._idle_ttl = idle_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, mode: ChatMode, state: DialogueState, session_id: str | None = None) -> ChatSession:
        session = ChatSession(session_id=session_id or uuid.uuid4().hex, mode=mode, state=state)
        with self._lock:
            self._sessions[session.session_id] = session
            self._touch(session.session_id)
            self._evict(keep=session.session_id)
        return session

    def get(self, session_id: str) -> ChatSession | None:
        with self._lock:
            self._evict()
            session = self._sessions.get(session_id)
            if session is not None:
                self._touch(session_id)
            return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._sessions.pop(session_id, None) is not None

    def iter_sessions(self) -> Iterable[str]:
        with self._lock:
            self._evict()
            return sorted(self._sessions)

    def _touch(self, session_id: str) -> None:
        self._sessions.move_to_end(session_id)
        self._last_seen[session_id] = self._clock()

    def _evict(self, keep: str | None = None) -> None:
        if self._idle_ttl is not None:
            cutoff = self._clock() - self._idle_ttl
            expired = [
                sid
                for sid, session in self._sessions.items()
                if sid != keep and self._last_seen[sid] <= cutoff and not session.busy
            ]
            for sid in expired:
                self._drop(sid)
            if expired:
                logger.info("Expired %d idle sessions", len(expired))

        if self._max_sessions is not None:
            overflow = len(self._sessions) - self._max_sessions
            idle = [sid for sid, session in self._sessions.items() if sid != keep and not session.busy]
            for sid in idle[: max(overflow, 0)]:
                self._drop(sid)
                logger.info("Evicted session %s to stay under %d sessions", sid, self._max_sessions)

    def _drop(self, session_id: str) -> None:
        del self._sessions[session_id]
        del self._last_seen[session_id]
