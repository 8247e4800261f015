"""API routes for chat session lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from virtual_agent.core.errors import SessionBusyError
from virtual_agent.dialogue.state import describe_state
from virtual_agent.responders.base import ChatMode
from virtual_agent.sessions.models import ChatSession
from virtual_agent.sessions.service import ConversationService


def create_sessions_router(service: ConversationService, default_mode: ChatMode) -> APIRouter:
    router = APIRouter(prefix="/sessions", tags=["sessions"])

    @router.post("")
    async def start_session(payload: dict | None = None) -> dict:
        mode = parse_mode((payload or {}).get("mode"), default_mode)
        session, outcome = service.start(mode)
        return {
            "session_id": session.session_id,
            "mode": session.mode.value,
            "state": describe_state(session.state),
            "messages": [message.to_dict() for message in outcome.messages],
        }

    @router.get("")
    async def list_sessions() -> list[str]:
        return list(service.store.iter_sessions())

    @router.get("/{session_id}")
    async def get_session(session_id: str) -> dict:
        session = _require(session_id)
        return {
            "session_id": session.session_id,
            "mode": session.mode.value,
            "busy": session.busy,
            "state": describe_state(session.state),
            "transcript": [entry.to_dict() for entry in session.transcript],
        }

    @router.put("/{session_id}/mode")
    async def switch_mode(session_id: str, payload: dict) -> dict:
        session = _require(session_id)
        if not payload.get("mode"):
            raise HTTPException(status_code=400, detail="mode is required")
        mode = parse_mode(payload.get("mode"), default_mode)
        try:
            outcome = service.switch_mode(session, mode)
        except SessionBusyError:
            raise HTTPException(status_code=409, detail="A previous message is still being processed") from None
        return {
            "session_id": session.session_id,
            "mode": session.mode.value,
            "state": describe_state(session.state),
            "messages": [message.to_dict() for message in outcome.messages],
        }

    @router.delete("/{session_id}")
    async def discard_session(session_id: str) -> dict:
        if not service.store.discard(session_id):
            raise HTTPException(status_code=404, detail="session not found")
        return {"session_id": session_id, "discarded": True}

    def _require(session_id: str) -> ChatSession:
        session = service.store.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="session not found")
        return session

    return router


def parse_mode(value: object, default: ChatMode) -> ChatMode:
    if value is None:
        return default
    try:
        return ChatMode(str(value).strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"unsupported mode: {value}") from None
