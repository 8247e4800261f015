"""Mode router mapping chat modes to responder implementations."""

from __future__ import annotations

from typing import Mapping

from virtual_agent.dialogue.messages import error
from virtual_agent.dialogue.state import DialogueState
from virtual_agent.responders.base import ChatMode, Responder, TurnOutcome


class ModeRouter:
    """Dispatch chat submissions to the responder for the session's mode."""

    def __init__(self, responders: Mapping[ChatMode, Responder]) -> None:
        self._responders = responders

    def greet(self, mode: ChatMode) -> TurnOutcome:
        responder = self._responders.get(mode)
        if not responder:
            raise KeyError(mode.value)
        return responder.greet()

    async def dispatch(self, mode: ChatMode, state: DialogueState, content: str) -> TurnOutcome:
        responder = self._responders.get(mode)
        if not responder:
            return TurnOutcome(
                state=state,
                messages=[error(f"The {mode.value} mode isn't available.")],
                success=False,
            )
        return await responder.respond(state, content)
