"""Pytest unit test fixtures."""

import asyncio

import pytest

from virtual_agent.dialogue.processor import TurnProcessor
from virtual_agent.dialogue.state import CategorySelection
from virtual_agent.sessions.store import InMemorySessionStore


@pytest.fixture()
def processor(fake_gateway):
    return TurnProcessor(fake_gateway)


@pytest.fixture()
def run_turns(processor):
    """Feed inputs through the processor, returning every TurnResult."""

    def _run(inputs, state=None):
        results = []

        async def _drive():
            current = state if state is not None else CategorySelection()
            for user_input in inputs:
                result = await processor.process(current, user_input)
                results.append(result)
                current = result.state

        asyncio.run(_drive())
        return results

    return _run


@pytest.fixture()
def session_store():
    return InMemorySessionStore()
