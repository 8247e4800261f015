import asyncio
import json

import httpx
import pytest

from virtual_agent.core.errors import GatewayError
from virtual_agent.dialogue.processor import TurnProcessor
from virtual_agent.dialogue.state import Action, Initial, ItemSelection
from virtual_agent.gateway import HttpResourceGateway, ResourceKind


def make_gateway(handler):
    return HttpResourceGateway(
        "http://catalog.test/",
        transport=httpx.MockTransport(handler),
    )


def test_list_uses_collection_path():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json=[{"sys_id": "spec-1", "u_name": "Fiber"}])

    records = asyncio.run(make_gateway(handler).list(ResourceKind.SPECIFICATION))

    assert seen == [("GET", "/product-specifications")]
    assert records[0]["u_name"] == "Fiber"


def test_create_posts_field_map():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"sys_id": "off-9", **captured["body"]})

    created = asyncio.run(make_gateway(handler).create(ResourceKind.OFFERING, {"u_name": "Plan"}))

    assert captured == {"method": "POST", "path": "/product-offerings", "body": {"u_name": "Plan"}}
    assert created["sys_id"] == "off-9"


def test_update_and_delete_target_item():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={"sys_id": "spec-1", "u_name": "Renamed"})

    gateway = make_gateway(handler)
    updated = asyncio.run(gateway.update(ResourceKind.SPECIFICATION, "spec-1", {"u_name": "Renamed"}))
    asyncio.run(gateway.delete(ResourceKind.SPECIFICATION, "spec-1"))

    assert updated["u_name"] == "Renamed"
    assert seen == [
        ("PUT", "/product-specifications/spec-1"),
        ("DELETE", "/product-specifications/spec-1"),
    ]


def test_error_status_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    with pytest.raises(GatewayError) as excinfo:
        asyncio.run(make_gateway(handler).create(ResourceKind.SPECIFICATION, {"u_name": "x"}))

    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "Failed to create product specification"


def test_transport_error_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError) as excinfo:
        asyncio.run(make_gateway(handler).get(ResourceKind.OFFERING, "off-1"))

    assert "Failed to load product offering" in str(excinfo.value)
    assert excinfo.value.status_code is None


def test_list_rejects_non_array_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(GatewayError):
        asyncio.run(make_gateway(handler).list(ResourceKind.OFFERING))


@pytest.mark.parametrize(
    ("resource_id", "raw_path"),
    [
        ("../product-offerings/off-9", b"/product-specifications/..%2Fproduct-offerings%2Foff-9"),
        ("spec-1?force=true", b"/product-specifications/spec-1%3Fforce%3Dtrue"),
        ("spec 1#frag", b"/product-specifications/spec%201%23frag"),
    ],
)
def test_item_ids_stay_inside_their_collection(resource_id, raw_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.raw_path, request.url.query))
        return httpx.Response(204)

    asyncio.run(make_gateway(handler).delete(ResourceKind.SPECIFICATION, resource_id))

    assert seen == [("DELETE", raw_path, b"")]


@pytest.mark.parametrize("resource_id", ["", "  ", ".", ".."])
def test_dot_or_blank_item_ids_are_rejected(resource_id):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    with pytest.raises(GatewayError):
        asyncio.run(make_gateway(handler).delete(ResourceKind.OFFERING, resource_id))
    assert seen == []


def test_delete_flow_never_reaches_other_collection():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.raw_path))
        return httpx.Response(404)

    processor = TurnProcessor(make_gateway(handler))
    state = ItemSelection(kind=ResourceKind.SPECIFICATION, action=Action.DELETE)

    result = asyncio.run(processor.process(state, "../product-offerings/off-9"))

    assert seen == [("DELETE", b"/product-specifications/..%2Fproduct-offerings%2Foff-9")]
    assert result.gateway_failure
    assert result.state == state
    assert result.state != Initial()
