"""FastAPI application entry point for the product virtual agent."""

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from virtual_agent.api.sessions import create_sessions_router
from virtual_agent.core.config import get_settings
from virtual_agent.core.errors import GatewayError, SessionBusyError, unhandled_exception_handler
from virtual_agent.core.logging import configure_logging, request_id_middleware
from virtual_agent.core.metrics import MetricsCollector
from virtual_agent.dialogue.processor import TurnProcessor
from virtual_agent.dialogue.state import describe_state
from virtual_agent.gateway import HttpResourceGateway, ResourceKind
from virtual_agent.responders import AssistantResponder, ChatMode, ModeRouter, StructuredResponder
from virtual_agent.sessions.service import ConversationService
from virtual_agent.sessions.store import InMemorySessionStore

settings = get_settings()
logger = logging.getLogger("va.app")

gateway = HttpResourceGateway(
    settings.catalog_api_base_url,
    specifications_path=settings.specifications_path,
    offerings_path=settings.offerings_path,
    timeout=settings.gateway_timeout_seconds,
)
metrics = MetricsCollector()
processor = TurnProcessor(gateway)
structured_responder = StructuredResponder(processor, metrics)
assistant_responder = AssistantResponder(
    settings.gemini_api_key,
    model=settings.gemini_model,
    base_url=settings.gemini_base_url,
    timeout=settings.gemini_timeout_seconds,
)
mode_router = ModeRouter(
    {
        ChatMode.STRUCTURED: structured_responder,
        ChatMode.ASSISTANT: assistant_responder,
    }
)
session_store = InMemorySessionStore(
    max_sessions=settings.max_sessions,
    idle_ttl_seconds=settings.session_idle_ttl_seconds,
)
conversations = ConversationService(session_store, mode_router, metrics)
default_mode = ChatMode(settings.default_mode)

app = FastAPI(title=settings.app_name, version="0.1.0", docs_url="/docs")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

app.include_router(create_sessions_router(conversations, default_mode))


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Return basic service status for monitoring."""

    return {"status": "ok"}


@app.get("/ready", tags=["health"])
async def readiness_probe() -> dict[str, Any]:
    """Readiness endpoint that verifies the catalog API answers.

    The generative assistant is optional; its absence only degrades the service.
    """

    components: dict[str, dict[str, Any]] = {}

    catalog_error: str | None = None
    try:
        await gateway.list(ResourceKind.SPECIFICATION)
    except GatewayError as exc:
        catalog_error = str(exc)
    components["catalog_api"] = {
        "base_url": gateway.base_url,
        "ok": catalog_error is None,
        **({"error": catalog_error} if catalog_error else {}),
    }
    components["assistant"] = {
        "model": settings.gemini_model,
        "ok": settings.assistant_enabled,
    }

    if not components["catalog_api"]["ok"]:
        overall = "fail"
    elif not components["assistant"]["ok"]:
        overall = "degraded"
    else:
        overall = "ok"

    return {
        "status": overall,
        "environment": settings.environment,
        "components": components,
    }


def get_conversations() -> ConversationService:
    """Dependency injector for the conversation service."""

    return conversations


@app.post("/chat", tags=["chat"])
async def chat(message: dict, service: ConversationService = Depends(get_conversations)) -> dict:
    """Submit one user message and return the agent's replies."""

    conversation_id = message.get("conversation_id")
    content = message.get("content")

    if not conversation_id or not isinstance(content, str) or not content.strip():
        raise HTTPException(status_code=400, detail="conversation_id and content are required")

    session = service.store.get(conversation_id)
    if session is None:
        session, _ = service.start(default_mode, session_id=conversation_id)

    try:
        outcome = await service.submit(session, content)
    except SessionBusyError:
        raise HTTPException(status_code=409, detail="A previous message is still being processed") from None

    return {
        "conversation_id": conversation_id,
        "mode": session.mode.value,
        "stage": outcome.state.stage.value,
        "state": describe_state(outcome.state),
        "messages": [reply.to_dict() for reply in outcome.messages],
        "error": not outcome.success,
    }


@app.on_event("startup")
async def startup_logging() -> None:
    level = configure_logging(settings.log_level)
    logger.info("Logging configured at %s level for %s environment", logging.getLevelName(level), settings.environment)


app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/metrics", tags=["metrics"])
async def metrics_endpoint() -> dict:
    snapshot = metrics.snapshot()
    return {
        "total_turns": snapshot.total_turns,
        "turns_by_stage": snapshot.turns_by_stage,
        "turns_by_mode": snapshot.turns_by_mode,
        "gateway_failures": snapshot.gateway_failures,
        "ratings": snapshot.ratings,
    }
