"""Dataclasses representing chat sessions and their transcripts."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from virtual_agent.dialogue.messages import AgentMessage
from virtual_agent.dialogue.state import DialogueState
from virtual_agent.responders.base import ChatMode


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class TranscriptEntry:
    """Single message shown in the chat log."""

    role: str
    text: str
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_user(cls, content: str) -> TranscriptEntry:
        return cls(role="user", text=content, payload={"from": "user", "text": content})

    @classmethod
    def from_agent(cls, message: AgentMessage) -> TranscriptEntry:
        return cls(role="agent", text=message.text, payload=message.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {**self.payload, "created_at": self.created_at.isoformat()}


@dataclass(slots=True)
class ChatSession:
    """Session-local chat state; nothing here outlives the process."""

    session_id: str
    mode: ChatMode
    state: DialogueState
    transcript: list[TranscriptEntry] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def busy(self) -> bool:
        return self.lock.locked()

    def record(self, content: str | None, messages: list[AgentMessage]) -> None:
        if content is not None:
            self.transcript.append(TranscriptEntry.from_user(content))
        self.transcript.extend(TranscriptEntry.from_agent(message) for message in messages)
