"""Base interface for the catalog REST boundary."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping

FieldMap = dict[str, Any]


class ResourceKind(str, Enum):
    """Resource collections managed through the virtual agent."""

    SPECIFICATION = "specification"
    OFFERING = "offering"

    @property
    def label(self) -> str:
        return f"product {self.value}"


class ResourceGateway(ABC):
    """Reads and writes catalog resources.

    Every method raises ``GatewayError`` when the request cannot be completed.
    """

    @abstractmethod
    async def list(self, kind: ResourceKind) -> list[FieldMap]:
        """Return every resource of the given kind."""

    @abstractmethod
    async def get(self, kind: ResourceKind, resource_id: str) -> FieldMap:
        """Return a single resource by ``sys_id``."""

    @abstractmethod
    async def create(self, kind: ResourceKind, fields: Mapping[str, Any]) -> FieldMap:
        """Create a resource and return the stored field map."""

    @abstractmethod
    async def update(self, kind: ResourceKind, resource_id: str, fields: Mapping[str, Any]) -> FieldMap:
        """Apply a partial update and return the stored field map."""

    @abstractmethod
    async def delete(self, kind: ResourceKind, resource_id: str) -> None:
        """Delete a resource."""
