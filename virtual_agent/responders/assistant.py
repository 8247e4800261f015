"""Free-form generative assistant responder."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from virtual_agent.core.errors import AssistantError
from virtual_agent.dialogue.messages import ASSISTANT_GREETING, error, text
from virtual_agent.dialogue.state import DialogueState, Initial
from virtual_agent.responders.base import ChatMode, Responder, TurnOutcome

FALLBACK_REPLY = "I'm having trouble generating a response."


class AssistantResponder(Responder):
    """Forward raw user text to the Gemini generateContent endpoint."""

    mode = ChatMode.ASSISTANT

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("va.assistant")

    def greet(self) -> TurnOutcome:
        return TurnOutcome(state=Initial(), messages=[text(ASSISTANT_GREETING)])

    async def respond(self, state: DialogueState, content: str) -> TurnOutcome:
        try:
            reply = await self.generate(content)
        except AssistantError as exc:
            return TurnOutcome(state=state, messages=[error(str(exc))], success=False)
        return TurnOutcome(state=state, messages=[text(reply)])

    async def generate(self, prompt: str) -> str:
        if not self._api_key:
            raise AssistantError("AI assistant is not configured")

        url = f"{self._base_url}/models/{self._model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    params={"key": self._api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            self._logger.exception("Generative request failed")
            raise AssistantError("Failed to get response") from exc

        data = _json_or_empty(response)
        if response.is_error:
            message = (data.get("error") or {}).get("message") or "AI response error"
            self._logger.warning("Generative API returned %s: %s", response.status_code, message)
            raise AssistantError(message)

        try:
            reply = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return FALLBACK_REPLY
        return reply or FALLBACK_REPLY


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
