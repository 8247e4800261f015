"""Dialogue state variants, one per stage of the structured conversation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Mapping, Union

from virtual_agent.gateway.base import ResourceKind


class Stage(str, Enum):
    """Discrete states of the structured dialogue."""

    INITIAL = "initial"
    CATEGORY_SELECTION = "category_selection"
    ACTION_SELECTION = "action_selection"
    COLLECTING_SPEC_FIELDS = "collecting_spec_fields"
    COLLECTING_OFFERING_REF = "collecting_offering_ref"
    COLLECTING_OFFERING_FIELDS = "collecting_offering_fields"
    ITEM_SELECTION = "item_selection"
    UPDATE_SPEC_FIELDS = "update_spec_fields"
    UPDATE_OFFERING_FIELDS = "update_offering_fields"


class Category(str, Enum):
    """Top-level menu entries."""

    SPECIFICATION = "specification"
    OFFERING = "offering"
    ISSUE = "issue"

    @property
    def resource_kind(self) -> ResourceKind | None:
        if self is Category.SPECIFICATION:
            return ResourceKind.SPECIFICATION
        if self is Category.OFFERING:
            return ResourceKind.OFFERING
        return None


class Action(str, Enum):
    """Operations offered for a category."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"


@dataclass(frozen=True, slots=True)
class Initial:
    stage: ClassVar[Stage] = Stage.INITIAL


@dataclass(frozen=True, slots=True)
class CategorySelection:
    stage: ClassVar[Stage] = Stage.CATEGORY_SELECTION


@dataclass(frozen=True, slots=True)
class ActionSelection:
    category: Category
    stage: ClassVar[Stage] = Stage.ACTION_SELECTION


@dataclass(frozen=True, slots=True)
class CollectingFields:
    """Create flow: values gathered one required field at a time.

    ``collected`` may hold extra keys (the offering back-reference) that are
    not in ``required``; they are posted along with the collected values.
    """

    kind: ResourceKind
    required: tuple[str, ...]
    collected: Mapping[str, str] = field(default_factory=dict)

    @property
    def stage(self) -> Stage:
        if self.kind is ResourceKind.OFFERING:
            return Stage.COLLECTING_OFFERING_FIELDS
        return Stage.COLLECTING_SPEC_FIELDS

    @property
    def current_field(self) -> str | None:
        for name in self.required:
            if name not in self.collected:
                return name
        return None

    def with_value(self, value: str) -> CollectingFields:
        current = self.current_field
        if current is None:
            return self
        return CollectingFields(
            kind=self.kind,
            required=self.required,
            collected={**self.collected, current: value},
        )


@dataclass(frozen=True, slots=True)
class CollectingOfferingRef:
    stage: ClassVar[Stage] = Stage.COLLECTING_OFFERING_REF


@dataclass(frozen=True, slots=True)
class ItemSelection:
    kind: ResourceKind
    action: Action
    stage: ClassVar[Stage] = Stage.ITEM_SELECTION


@dataclass(frozen=True, slots=True)
class UpdatingFields:
    """Update flow: fields chosen by the user and their new values."""

    kind: ResourceKind
    selected_item: str
    update_fields: tuple[str, ...] = ()
    collected: Mapping[str, str] = field(default_factory=dict)

    @property
    def stage(self) -> Stage:
        if self.kind is ResourceKind.OFFERING:
            return Stage.UPDATE_OFFERING_FIELDS
        return Stage.UPDATE_SPEC_FIELDS

    @property
    def current_update_field(self) -> str | None:
        for name in self.update_fields:
            if name not in self.collected:
                return name
        return None

    @property
    def awaiting_value(self) -> bool:
        return self.current_update_field is not None

    @property
    def complete(self) -> bool:
        return bool(self.update_fields) and self.current_update_field is None

    def with_field(self, name: str) -> UpdatingFields:
        if name in self.update_fields:
            return self
        return UpdatingFields(
            kind=self.kind,
            selected_item=self.selected_item,
            update_fields=(*self.update_fields, name),
            collected=self.collected,
        )

    def with_value(self, value: str) -> UpdatingFields:
        current = self.current_update_field
        if current is None:
            return self
        return UpdatingFields(
            kind=self.kind,
            selected_item=self.selected_item,
            update_fields=self.update_fields,
            collected={**self.collected, current: value},
        )


DialogueState = Union[
    Initial,
    CategorySelection,
    ActionSelection,
    CollectingFields,
    CollectingOfferingRef,
    ItemSelection,
    UpdatingFields,
]


def describe_state(state: DialogueState) -> dict[str, object]:
    """Flatten a state variant into a JSON-friendly mapping for API responses."""

    payload: dict[str, object] = {"stage": state.stage.value}
    if isinstance(state, ActionSelection):
        payload["selected_category"] = state.category.value
    elif isinstance(state, CollectingFields):
        payload["selected_category"] = state.kind.value
        payload["selected_action"] = Action.CREATE.value
        payload["current_field"] = state.current_field
        payload["required_fields"] = list(state.required)
        payload["collected_fields"] = dict(state.collected)
    elif isinstance(state, CollectingOfferingRef):
        payload["selected_category"] = Category.OFFERING.value
        payload["selected_action"] = Action.CREATE.value
    elif isinstance(state, ItemSelection):
        payload["selected_category"] = state.kind.value
        payload["selected_action"] = state.action.value
    elif isinstance(state, UpdatingFields):
        payload["selected_category"] = state.kind.value
        payload["selected_action"] = Action.UPDATE.value
        payload["selected_item"] = state.selected_item
        payload["update_fields"] = list(state.update_fields)
        payload["current_update_field"] = state.current_update_field
        payload["collected_update_values"] = dict(state.collected)
    return payload
