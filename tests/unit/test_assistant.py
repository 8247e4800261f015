import asyncio

import httpx

from virtual_agent.dialogue.state import Initial
from virtual_agent.responders.assistant import FALLBACK_REPLY, AssistantResponder


def make_responder(handler, api_key="test-key"):
    return AssistantResponder(api_key, transport=httpx.MockTransport(handler))


def test_reply_is_returned_verbatim():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["key"] = request.url.params.get("key")
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "Pricing tiers look fine."}]}}]},
        )

    outcome = asyncio.run(make_responder(handler).respond(Initial(), "Review my pricing"))

    assert outcome.success
    assert outcome.messages[0].text == "Pricing tiers look fine."
    assert captured["path"].endswith("/models/gemini-2.0-flash:generateContent")
    assert captured["key"] == "test-key"


def test_missing_candidates_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": []})

    outcome = asyncio.run(make_responder(handler).respond(Initial(), "hi"))

    assert outcome.messages[0].text == FALLBACK_REPLY


def test_api_error_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "API key not valid"}})

    outcome = asyncio.run(make_responder(handler).respond(Initial(), "hi"))

    assert not outcome.success
    assert outcome.messages[0].error
    assert outcome.messages[0].text == "⚠️ Error: API key not valid"


def test_unconfigured_assistant_reports_error():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    outcome = asyncio.run(make_responder(handler, api_key=None).respond(Initial(), "hi"))

    assert not outcome.success
    assert "not configured" in outcome.messages[0].text


def test_state_is_passed_through():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    state = Initial()
    outcome = asyncio.run(make_responder(handler).respond(state, "hi"))

    assert outcome.state is state
