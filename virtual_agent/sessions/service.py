"""Session orchestration: greeting, turn submission and mode switching."""

from __future__ import annotations

import logging

from virtual_agent.core.errors import SessionBusyError
from virtual_agent.core.metrics import MetricsCollector
from virtual_agent.responders.base import ChatMode, TurnOutcome
from virtual_agent.responders.router import ModeRouter
from virtual_agent.sessions.models import ChatSession
from virtual_agent.sessions.store import SessionStore

logger = logging.getLogger("va.sessions")


class ConversationService:
    """Runs one turn at a time per session against the mode's responder."""

    def __init__(self, store: SessionStore, router: ModeRouter, metrics: MetricsCollector) -> None:
        self.store = store
        self.router = router
        self.metrics = metrics

    def start(self, mode: ChatMode, session_id: str | None = None) -> tuple[ChatSession, TurnOutcome]:
        outcome = self.router.greet(mode)
        session = self.store.create(mode, outcome.state, session_id=session_id)
        session.record(None, outcome.messages)
        logger.info("Started %s session %s", mode.value, session.session_id)
        return session, outcome

    def switch_mode(self, session: ChatSession, mode: ChatMode) -> TurnOutcome:
        if session.busy:
            raise SessionBusyError(session.session_id)
        outcome = self.router.greet(mode)
        session.mode = mode
        session.state = outcome.state
        session.record(None, outcome.messages)
        return outcome

    async def submit(self, session: ChatSession, content: str) -> TurnOutcome:
        if session.busy:
            raise SessionBusyError(session.session_id)

        async with session.lock:
            stage = session.state.stage
            outcome = await self.router.dispatch(session.mode, session.state, content)
            session.state = outcome.state
            session.record(content, outcome.messages)

        self.metrics.record_turn(session.mode.value, stage.value)
        return outcome
