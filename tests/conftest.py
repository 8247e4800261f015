from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Mapping

import pytest

from virtual_agent.core.errors import GatewayError
from virtual_agent.gateway.base import FieldMap, ResourceGateway, ResourceKind


class FakeGateway(ResourceGateway):
    """In-memory catalog recording every call; ``fail_on`` names operations that raise."""

    def __init__(self, records: Mapping[str, list[dict[str, Any]]] | None = None) -> None:
        self.base_url = "memory://catalog"
        self.records: dict[ResourceKind, list[dict[str, Any]]] = {kind: [] for kind in ResourceKind}
        for key, items in (records or {}).items():
            self.records[ResourceKind(key)] = copy.deepcopy(items)
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: set[str] = set()
        self._counter = 0

    def calls_for(self, operation: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == operation]

    def _check(self, operation: str, kind: ResourceKind) -> None:
        if operation in self.fail_on:
            raise GatewayError(f"Failed to {operation} {kind.label}", status_code=500)

    def _find(self, kind: ResourceKind, resource_id: str) -> dict[str, Any]:
        for record in self.records[kind]:
            if record.get("sys_id") == resource_id:
                return record
        raise GatewayError(f"Failed to load {kind.label}", status_code=404)

    async def list(self, kind: ResourceKind) -> list[FieldMap]:
        self.calls.append(("list", kind))
        self._check("list", kind)
        return copy.deepcopy(self.records[kind])

    async def get(self, kind: ResourceKind, resource_id: str) -> FieldMap:
        self.calls.append(("get", kind, resource_id))
        self._check("get", kind)
        return copy.deepcopy(self._find(kind, resource_id))

    async def create(self, kind: ResourceKind, fields: Mapping[str, Any]) -> FieldMap:
        self.calls.append(("create", kind, dict(fields)))
        self._check("create", kind)
        self._counter += 1
        record = {"sys_id": f"{kind.value}-{self._counter}", **fields}
        self.records[kind].append(record)
        return copy.deepcopy(record)

    async def update(self, kind: ResourceKind, resource_id: str, fields: Mapping[str, Any]) -> FieldMap:
        self.calls.append(("update", kind, resource_id, dict(fields)))
        self._check("update", kind)
        record = self._find(kind, resource_id)
        record.update(fields)
        return copy.deepcopy(record)

    async def delete(self, kind: ResourceKind, resource_id: str) -> None:
        self.calls.append(("delete", kind, resource_id))
        self._check("delete", kind)
        record = self._find(kind, resource_id)
        self.records[kind].remove(record)


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def catalog_records(fixtures_dir: Path) -> dict:
    return json.loads((fixtures_dir / "catalog.json").read_text(encoding="utf-8"))


@pytest.fixture
def fake_gateway(catalog_records: dict) -> FakeGateway:
    return FakeGateway(catalog_records)


@pytest.fixture
def empty_gateway() -> FakeGateway:
    return FakeGateway()
