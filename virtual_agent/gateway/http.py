"""httpx-backed client for the catalog REST API."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from virtual_agent.core.errors import GatewayError
from virtual_agent.gateway.base import FieldMap, ResourceGateway, ResourceKind


class HttpResourceGateway(ResourceGateway):
    """Catalog resources served by the product REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        specifications_path: str = "product-specifications",
        offerings_path: str = "product-offerings",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._paths = {
            ResourceKind.SPECIFICATION: specifications_path.strip("/"),
            ResourceKind.OFFERING: offerings_path.strip("/"),
        }
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("va.gateway")

    def collection_url(self, kind: ResourceKind) -> str:
        return f"{self.base_url}/{self._paths[kind]}"

    def item_url(self, kind: ResourceKind, resource_id: str) -> str:
        """URL of one resource; the id is always a single path segment."""

        if resource_id.strip() in ("", ".", ".."):
            raise GatewayError(f"Invalid {kind.label} id: {resource_id!r}")
        return f"{self.collection_url(kind)}/{quote(resource_id, safe='')}"

    async def list(self, kind: ResourceKind) -> list[FieldMap]:
        payload = await self._request("GET", self.collection_url(kind), failure=f"Failed to load {kind.label}s")
        if not isinstance(payload, list):
            raise GatewayError(f"Unexpected response while listing {kind.label}s")
        return payload

    async def get(self, kind: ResourceKind, resource_id: str) -> FieldMap:
        payload = await self._request(
            "GET",
            self.item_url(kind, resource_id),
            failure=f"Failed to load {kind.label}",
        )
        if not isinstance(payload, dict):
            raise GatewayError(f"Unexpected response while loading {kind.label}")
        return payload

    async def create(self, kind: ResourceKind, fields: Mapping[str, Any]) -> FieldMap:
        payload = await self._request(
            "POST",
            self.collection_url(kind),
            json=dict(fields),
            failure=f"Failed to create {kind.label}",
        )
        return payload if isinstance(payload, dict) else {}

    async def update(self, kind: ResourceKind, resource_id: str, fields: Mapping[str, Any]) -> FieldMap:
        payload = await self._request(
            "PUT",
            self.item_url(kind, resource_id),
            json=dict(fields),
            failure=f"Failed to update {kind.label}",
        )
        return payload if isinstance(payload, dict) else {}

    async def delete(self, kind: ResourceKind, resource_id: str) -> None:
        await self._request(
            "DELETE",
            self.item_url(kind, resource_id),
            failure=f"Failed to delete {kind.label}",
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        failure: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            self._logger.warning("%s %s failed: %s", method, url, exc)
            raise GatewayError(f"{failure}: {exc}") from exc

        if response.is_error:
            self._logger.warning("%s %s returned %s", method, url, response.status_code)
            raise GatewayError(failure, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(f"{failure}: invalid JSON response") from exc
