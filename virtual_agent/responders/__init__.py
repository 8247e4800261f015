"""Responder package exports."""

from .assistant import AssistantResponder
from .base import ChatMode, Responder, TurnOutcome
from .router import ModeRouter
from .structured import StructuredResponder

__all__ = [
    "AssistantResponder",
    "ChatMode",
    "ModeRouter",
    "Responder",
    "StructuredResponder",
    "TurnOutcome",
]
