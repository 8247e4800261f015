"""Integration fixtures wiring the app to an in-memory catalog."""

import pytest


@pytest.fixture()
def catalog(monkeypatch, fake_gateway):
    from virtual_agent import main

    monkeypatch.setattr(main.processor, "gateway", fake_gateway)
    monkeypatch.setattr(main, "gateway", fake_gateway)
    return fake_gateway
