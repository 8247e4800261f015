"""Catalog gateway exports."""

from .base import FieldMap, ResourceGateway, ResourceKind
from .http import HttpResourceGateway

__all__ = [
    "FieldMap",
    "ResourceGateway",
    "ResourceKind",
    "HttpResourceGateway",
]
