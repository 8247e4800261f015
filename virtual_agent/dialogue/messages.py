"""Agent message payloads produced by a turn."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from virtual_agent.dialogue.schema import FIELD_TOKEN_PREFIX, editable_fields, field_label, item_description
from virtual_agent.gateway.base import ResourceKind

ERROR_PREFIX = "⚠️ Error: "


@dataclass(frozen=True, slots=True)
class Option:
    """Selectable button; ``value`` is submitted as the next user input."""

    text: str
    value: str


@dataclass(frozen=True, slots=True)
class ItemChoice:
    """Selectable record; ``id`` is submitted as the next user input."""

    id: str
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class AgentMessage:
    text: str
    options: tuple[Option, ...] = ()
    items: tuple[ItemChoice, ...] = ()
    error: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"from": "agent", "text": self.text}
        if self.options:
            payload["options"] = [{"text": option.text, "value": option.value} for option in self.options]
        if self.items:
            payload["items"] = [
                {"id": item.id, "name": item.name, "description": item.description} for item in self.items
            ]
        if self.error:
            payload["error"] = True
        return payload


CATEGORY_OPTIONS = (
    Option("📦 Product Offerings", "offering"),
    Option("📑 Product Specifications", "specification"),
    Option("⚠️ Issues", "issue"),
)

ACTION_OPTIONS = (
    Option("➕ Create", "create"),
    Option("✏️ Update", "update"),
    Option("❌ Delete", "delete"),
    Option("📄 View Details", "view"),
)

RATING_OPTIONS = (
    Option("⭐️⭐️⭐️⭐️⭐️", "5_stars"),
    Option("⭐️⭐️⭐️⭐️", "4_stars"),
    Option("⭐️⭐️⭐️", "3_stars"),
    Option("⭐️⭐️", "2_stars"),
    Option("⭐️", "1_star"),
)

RATING_VALUES = frozenset(option.value for option in RATING_OPTIONS)

STRUCTURED_GREETING = "👋 Hi! I'm your Product Management Assistant. What would you like help with today?"
ASSISTANT_GREETING = "👋 Hi! I'm your Product AI Assistant. How can I help with your product management today?"


def text(message: str) -> AgentMessage:
    return AgentMessage(text=message)


def error(message: str) -> AgentMessage:
    return AgentMessage(text=f"{ERROR_PREFIX}{message}", error=True)


def category_menu(message: str = "What would you like help with today?") -> AgentMessage:
    return AgentMessage(text=message, options=CATEGORY_OPTIONS)


def action_menu(category_label: str) -> AgentMessage:
    return AgentMessage(
        text=f"What action would you like to perform on {category_label}?",
        options=ACTION_OPTIONS,
    )


def with_rating(message: str) -> AgentMessage:
    return AgentMessage(text=message, options=RATING_OPTIONS)


def item_list(message: str, kind: ResourceKind, records: Iterable[Mapping[str, Any]]) -> AgentMessage:
    items = tuple(
        ItemChoice(
            id=str(record.get("sys_id", "")),
            name=str(record.get("u_name", "")),
            description=item_description(kind, record),
        )
        for record in records
    )
    return AgentMessage(text=message, items=items)


def field_menu(kind: ResourceKind) -> AgentMessage:
    options = tuple(
        Option(f"{field_label(name)} ({name})", f"{FIELD_TOKEN_PREFIX}{name}") for name in editable_fields(kind)
    )
    return AgentMessage(text="Which fields would you like to update? (Select all that apply)", options=options)
