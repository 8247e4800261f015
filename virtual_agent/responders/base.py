"""Base classes and types for chat responders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from virtual_agent.dialogue.messages import AgentMessage
from virtual_agent.dialogue.state import DialogueState


class ChatMode(str, Enum):
    """Chat widget modes."""

    STRUCTURED = "structured"
    ASSISTANT = "assistant"


@dataclass(slots=True)
class TurnOutcome:
    """Standard responder output for one user submission."""

    state: DialogueState
    messages: list[AgentMessage] = field(default_factory=list)
    success: bool = True


class Responder(ABC):
    """Produces agent replies for one chat mode."""

    mode: ChatMode

    @abstractmethod
    async def respond(self, state: DialogueState, content: str) -> TurnOutcome:
        """Handle one user submission against the session's dialogue state."""

    @abstractmethod
    def greet(self) -> TurnOutcome:
        """Return the opening state and messages for a fresh session."""
