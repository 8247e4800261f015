"""Structured catalog dialogue responder."""

from __future__ import annotations

from virtual_agent.core.metrics import MetricsCollector
from virtual_agent.dialogue.processor import TurnProcessor, initial_state, opening_messages
from virtual_agent.dialogue.state import DialogueState
from virtual_agent.responders.base import ChatMode, Responder, TurnOutcome


class StructuredResponder(Responder):
    """Guided create/view/update/delete dialogue over the product catalog."""

    mode = ChatMode.STRUCTURED

    def __init__(self, processor: TurnProcessor, metrics: MetricsCollector | None = None) -> None:
        self.processor = processor
        self._metrics = metrics

    def greet(self) -> TurnOutcome:
        return TurnOutcome(state=initial_state(structured=True), messages=opening_messages())

    async def respond(self, state: DialogueState, content: str) -> TurnOutcome:
        result = await self.processor.process(state, content)

        if self._metrics is not None:
            if result.gateway_failure:
                self._metrics.record_gateway_failure(state.stage.value)
            if result.rating:
                self._metrics.record_rating(result.rating)

        return TurnOutcome(state=result.state, messages=result.messages, success=not result.gateway_failure)
