"""Turn processor driving the structured catalog dialogue."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping

from virtual_agent.core.errors import GatewayError
from virtual_agent.dialogue import messages as msg
from virtual_agent.dialogue.messages import AgentMessage, Option
from virtual_agent.dialogue.schema import (
    OFFERING_SPEC_NAME,
    OFFERING_SPEC_REF,
    display_name,
    format_details,
    parse_field_token,
    required_fields,
)
from virtual_agent.dialogue.state import (
    Action,
    ActionSelection,
    Category,
    CategorySelection,
    CollectingFields,
    CollectingOfferingRef,
    DialogueState,
    Initial,
    ItemSelection,
    Stage,
    UpdatingFields,
)
from virtual_agent.gateway.base import FieldMap, ResourceGateway, ResourceKind

logger = logging.getLogger("va.dialogue")

CANCEL = "cancel"

CATEGORY_ALIASES = {
    "specification": Category.SPECIFICATION,
    "specifications": Category.SPECIFICATION,
    "product_specification": Category.SPECIFICATION,
    "product_specifications": Category.SPECIFICATION,
    "offering": Category.OFFERING,
    "offerings": Category.OFFERING,
    "product_offering": Category.OFFERING,
    "product_offerings": Category.OFFERING,
    "issue": Category.ISSUE,
    "issues": Category.ISSUE,
}

CATEGORY_LABELS = {
    Category.SPECIFICATION: "product specifications",
    Category.OFFERING: "product offerings",
    Category.ISSUE: "issues",
}


@dataclass(slots=True)
class TurnResult:
    """Successor state plus the agent messages produced by one turn."""

    state: DialogueState
    messages: list[AgentMessage] = field(default_factory=list)
    gateway_failure: bool = False
    rating: str | None = None


def initial_state(structured: bool = True) -> DialogueState:
    """Starting state: the structured widget opens on the category menu."""

    return CategorySelection() if structured else Initial()


def opening_messages() -> list[AgentMessage]:
    return [msg.category_menu(msg.STRUCTURED_GREETING)]


def parse_category(value: str) -> Category | None:
    return CATEGORY_ALIASES.get(value.strip().lower().replace(" ", "_"))


def parse_action(value: str) -> Action | None:
    try:
        return Action(value.strip().lower())
    except ValueError:
        return None


Handler = Callable[[DialogueState, str], Awaitable[TurnResult]]


class TurnProcessor:
    """Computes ``(state, input) -> (state, messages)`` for structured mode.

    Gateway failures never escape: they become a single error message and the
    state returned is the one the turn started from. The final create/update
    submission is the exception, where the completed value map is kept so the
    next input of any kind retries the write.
    """

    def __init__(self, gateway: ResourceGateway) -> None:
        self.gateway = gateway
        self._handlers: dict[Stage, Handler] = {
            Stage.INITIAL: self._handle_initial,
            Stage.CATEGORY_SELECTION: self._handle_category,
            Stage.ACTION_SELECTION: self._handle_action,
            Stage.COLLECTING_SPEC_FIELDS: self._handle_collecting,
            Stage.COLLECTING_OFFERING_FIELDS: self._handle_collecting,
            Stage.COLLECTING_OFFERING_REF: self._handle_offering_ref,
            Stage.ITEM_SELECTION: self._handle_item,
            Stage.UPDATE_SPEC_FIELDS: self._handle_update,
            Stage.UPDATE_OFFERING_FIELDS: self._handle_update,
        }

    def handles(self, stage: Stage) -> bool:
        return stage in self._handlers

    async def process(self, state: DialogueState, user_input: str) -> TurnResult:
        value = user_input.strip()

        if value.lower() == CANCEL and not isinstance(state, Initial):
            logger.debug("Flow cancelled at %s", state.stage.value)
            return TurnResult(
                state=CategorySelection(),
                messages=[msg.category_menu("Okay, I've cancelled that. What would you like help with?")],
            )

        handler = self._handlers.get(state.stage, self._handle_initial)
        try:
            result = await handler(state, value)
        except GatewayError as exc:
            return self._failure(state, exc)

        logger.debug("Stage %s -> %s", state.stage.value, result.state.stage.value)
        return result

    async def _handle_initial(self, state: DialogueState, value: str) -> TurnResult:
        replies: list[AgentMessage] = []
        rating = value if value in msg.RATING_VALUES else None
        if rating:
            replies.append(msg.text("Thanks for your feedback!"))
        replies.append(msg.category_menu())
        return TurnResult(state=CategorySelection(), messages=replies, rating=rating)

    async def _handle_category(self, state: DialogueState, value: str) -> TurnResult:
        category = parse_category(value)
        if category is None:
            return TurnResult(
                state=state,
                messages=[
                    msg.category_menu(
                        "I can help you with Product Offerings, Product Specifications, or Issues. "
                        "Which one would you like?"
                    )
                ],
            )

        return TurnResult(
            state=ActionSelection(category=category),
            messages=[msg.action_menu(CATEGORY_LABELS[category])],
        )

    async def _handle_action(self, state: ActionSelection, value: str) -> TurnResult:
        action = parse_action(value)
        if action is None:
            return TurnResult(state=state, messages=[msg.action_menu(CATEGORY_LABELS[state.category])])

        kind = state.category.resource_kind
        if kind is None:
            return TurnResult(
                state=CategorySelection(),
                messages=[
                    msg.text("Issue management isn't available through the assistant yet."),
                    msg.category_menu("Is there anything else I can help you with?"),
                ],
            )

        if action is Action.CREATE and kind is ResourceKind.SPECIFICATION:
            collecting = CollectingFields(kind=kind, required=required_fields(kind))
            return TurnResult(
                state=collecting,
                messages=[msg.text("Please provide the name (u_name) for the product specification:")],
            )

        if action is Action.CREATE:
            specifications = await self.gateway.list(ResourceKind.SPECIFICATION)
            if not specifications:
                return TurnResult(
                    state=CategorySelection(),
                    messages=[
                        AgentMessage(
                            text="No product specifications found. You must create a product specification first.",
                            options=(
                                Option("Create Product Specification", Category.SPECIFICATION.value),
                                Option("Cancel", CANCEL),
                            ),
                        )
                    ],
                )
            return TurnResult(
                state=CollectingOfferingRef(),
                messages=[
                    msg.item_list(
                        "Select the product specification this offering is based on:",
                        ResourceKind.SPECIFICATION,
                        specifications,
                    )
                ],
            )

        records = await self.gateway.list(kind)
        if not records:
            return TurnResult(
                state=state,
                messages=[
                    AgentMessage(
                        text=f"No {kind.label}s found. Would you like to create one?",
                        options=(Option("Yes", Action.CREATE.value), Option("No", CANCEL)),
                    )
                ],
            )
        return TurnResult(
            state=ItemSelection(kind=kind, action=action),
            messages=[msg.item_list(f"Select the {kind.label} you want to {action.value}:", kind, records)],
        )

    async def _handle_collecting(self, state: CollectingFields, value: str) -> TurnResult:
        current = state.current_field
        if current is not None:
            if not value:
                return TurnResult(state=state, messages=[self._prompt_field(current)])
            state = state.with_value(value)

        next_field = state.current_field
        if next_field is not None:
            return TurnResult(state=state, messages=[self._prompt_field(next_field)])

        try:
            created = await self.gateway.create(state.kind, dict(state.collected))
        except GatewayError as exc:
            return self._failure(state, exc)

        name = _record_name(created, state.collected)
        logger.info("Created %s %s", state.kind.value, created.get("sys_id", name))
        return TurnResult(
            state=Initial(),
            messages=[msg.with_rating(f'✅ Successfully created {state.kind.label} "{name}"!')],
        )

    async def _handle_offering_ref(self, state: CollectingOfferingRef, value: str) -> TurnResult:
        if not value:
            specifications = await self.gateway.list(ResourceKind.SPECIFICATION)
            return TurnResult(
                state=state,
                messages=[
                    msg.item_list(
                        "Select the product specification this offering is based on:",
                        ResourceKind.SPECIFICATION,
                        specifications,
                    )
                ],
            )

        specification = await self.gateway.get(ResourceKind.SPECIFICATION, value)
        spec_name = specification.get("u_name", "")
        collecting = CollectingFields(
            kind=ResourceKind.OFFERING,
            required=required_fields(ResourceKind.OFFERING),
            collected={
                OFFERING_SPEC_REF: str(specification.get("sys_id") or value),
                OFFERING_SPEC_NAME: spec_name,
            },
        )
        return TurnResult(
            state=collecting,
            messages=[
                msg.text(f'Creating product offering based on "{spec_name}". Please provide the name (u_name):')
            ],
        )

    async def _handle_item(self, state: ItemSelection, value: str) -> TurnResult:
        if not value:
            records = await self.gateway.list(state.kind)
            return TurnResult(
                state=state,
                messages=[
                    msg.item_list(
                        f"Select the {state.kind.label} you want to {state.action.value}:", state.kind, records
                    )
                ],
            )

        if state.action is Action.UPDATE:
            return TurnResult(
                state=UpdatingFields(kind=state.kind, selected_item=value),
                messages=[msg.field_menu(state.kind)],
            )

        if state.action is Action.DELETE:
            await self.gateway.delete(state.kind, value)
            logger.info("Deleted %s %s", state.kind.value, value)
            return TurnResult(
                state=Initial(),
                messages=[msg.with_rating(f"✅ {state.kind.label.capitalize()} deleted successfully!")],
            )

        record = await self.gateway.get(state.kind, value)
        return TurnResult(
            state=Initial(),
            messages=[AgentMessage(text=format_details(state.kind, record), options=msg.RATING_OPTIONS)],
        )

    async def _handle_update(self, state: UpdatingFields, value: str) -> TurnResult:
        if state.complete:
            return await self._commit_update(state)

        selected = parse_field_token(value, state.kind, allow_bare=not state.awaiting_value)
        if selected is not None:
            updated = state.with_field(selected)
            current = updated.current_update_field
            if selected == current:
                reply = self._prompt_update(current)
            elif selected in state.update_fields:
                reply = msg.text(
                    f"{display_name(selected)} is already selected. "
                    f"Please provide the new value for {display_name(current)}:"
                )
            else:
                reply = msg.text(
                    f"Added {display_name(selected)} to the update. "
                    f"Please provide the new value for {display_name(current)}:"
                )
            return TurnResult(state=updated, messages=[reply])

        if not state.awaiting_value:
            return TurnResult(state=state, messages=[msg.field_menu(state.kind)])

        if not value:
            return TurnResult(state=state, messages=[self._prompt_update(state.current_update_field)])

        updated = state.with_value(value)
        if updated.current_update_field is not None:
            return TurnResult(state=updated, messages=[self._prompt_update(updated.current_update_field)])
        return await self._commit_update(updated)

    async def _commit_update(self, state: UpdatingFields) -> TurnResult:
        try:
            updated = await self.gateway.update(state.kind, state.selected_item, dict(state.collected))
        except GatewayError as exc:
            return self._failure(state, exc)

        name = _record_name(updated, state.collected)
        logger.info("Updated %s %s", state.kind.value, state.selected_item)
        return TurnResult(
            state=Initial(),
            messages=[msg.with_rating(f'✅ Successfully updated {state.kind.label} "{name}"!')],
        )

    def _prompt_field(self, name: str) -> AgentMessage:
        return msg.text(f"Please provide the {display_name(name)}:")

    def _prompt_update(self, name: str | None) -> AgentMessage:
        return msg.text(f"Please provide the new value for {display_name(name or '')}:")

    def _failure(self, state: DialogueState, exc: GatewayError) -> TurnResult:
        logger.warning("Gateway call failed at stage %s: %s", state.stage.value, exc)
        return TurnResult(
            state=state,
            messages=[msg.error(str(exc) or "Failed to perform action")],
            gateway_failure=True,
        )


def _record_name(record: FieldMap, collected: Mapping[str, str]) -> str:
    return str(record.get("u_name") or collected.get("u_name", ""))
