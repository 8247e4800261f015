"""Catalog field schemas and their presentation in the dialogue."""

from __future__ import annotations

from typing import Any, Mapping

from virtual_agent.gateway.base import ResourceKind

FIELD_PREFIX = "u_"
FIELD_TOKEN_PREFIX = "field:"

SPECIFICATION_FIELDS: tuple[str, ...] = (
    "u_name",
    "u_description",
    "u_version",
    "u_valid_from",
    "u_valid_to",
)

OFFERING_FIELDS: tuple[str, ...] = (
    "u_name",
    "u_price",
    "u_category",
    "u_unit_of_measure",
    "u_channel",
    "u_status",
    "u_external_id",
    "u_valid_from",
    "u_valid_to",
)

# Back-reference stored on an offering pointing at its specification.
OFFERING_SPEC_REF = "u_product_specification"
OFFERING_SPEC_NAME = "u_specification_name"

FIELD_LABELS = {
    "u_name": "Name",
    "u_description": "Description",
    "u_version": "Version",
    "u_valid_from": "Valid From",
    "u_valid_to": "Valid To",
    "u_price": "Price",
    "u_category": "Category",
    "u_unit_of_measure": "Unit",
    "u_channel": "Channel",
    "u_status": "Status",
    "u_external_id": "External ID",
    OFFERING_SPEC_NAME: "Based on",
}


def required_fields(kind: ResourceKind) -> tuple[str, ...]:
    if kind is ResourceKind.OFFERING:
        return OFFERING_FIELDS
    return SPECIFICATION_FIELDS


def editable_fields(kind: ResourceKind) -> tuple[str, ...]:
    return required_fields(kind)


def display_name(field_name: str) -> str:
    """Strip the schema prefix for prompts (``u_valid_from`` -> ``valid_from``)."""

    if field_name.startswith(FIELD_PREFIX):
        return field_name[len(FIELD_PREFIX):]
    return field_name


def field_label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, display_name(field_name).replace("_", " ").title())


def item_description(kind: ResourceKind, record: Mapping[str, Any]) -> str:
    if kind is ResourceKind.OFFERING:
        return f"Price: {record.get('u_price')} | Category: {record.get('u_category')}"
    return record.get("u_description") or "No description available"


def detail_fields(kind: ResourceKind) -> tuple[str, ...]:
    if kind is ResourceKind.OFFERING:
        return (*OFFERING_FIELDS, OFFERING_SPEC_NAME)
    return SPECIFICATION_FIELDS


def format_details(kind: ResourceKind, record: Mapping[str, Any]) -> str:
    """Render a record as the bulleted dump shown by the view action."""

    title = "Product Offering Details" if kind is ResourceKind.OFFERING else "Product Specification Details"
    lines = [f"📋 {title}:"]
    for name in detail_fields(kind):
        lines.append(f"• {field_label(name)}: {record.get(name, '')}")
    return "\n".join(lines)


def parse_field_token(value: str, kind: ResourceKind, *, allow_bare: bool) -> str | None:
    """Return the field named by ``value`` or ``None`` if it names no editable field.

    ``field:u_price`` always selects; a bare ``u_price`` only when ``allow_bare``.
    """

    candidate = value.strip()
    if candidate.startswith(FIELD_TOKEN_PREFIX):
        candidate = candidate[len(FIELD_TOKEN_PREFIX):].strip()
    elif not allow_bare:
        return None

    fields = editable_fields(kind)
    if candidate in fields:
        return candidate
    prefixed = f"{FIELD_PREFIX}{candidate}"
    if prefixed in fields:
        return prefixed
    return None
