"""Bulk-load catalog records through the gateway."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from virtual_agent.dialogue.schema import OFFERING_SPEC_NAME, OFFERING_SPEC_REF
from virtual_agent.gateway.base import ResourceGateway, ResourceKind


@dataclass(slots=True)
class SeedReport:
    specifications: int = 0
    offerings: int = 0
    skipped: list[str] = field(default_factory=list)


def load_seed_file(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Read ``{"specifications": [...], "offerings": [...]}`` from disk."""

    if not path or not path.exists():
        raise FileNotFoundError("Provide --input-file pointing to a catalog JSON export")

    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    if not isinstance(data, dict):
        raise ValueError("Expected a top-level JSON object with specifications/offerings arrays")

    payload: dict[str, list[dict[str, Any]]] = {}
    for key in ("specifications", "offerings"):
        records = data.get(key, [])
        if not isinstance(records, list):
            raise ValueError(f"Expected '{key}' to be an array")
        payload[key] = records
    return payload


async def seed_catalog(gateway: ResourceGateway, payload: dict[str, list[dict[str, Any]]]) -> SeedReport:
    """Create specifications, then offerings linked by ``specification`` name."""

    report = SeedReport()
    spec_ids: dict[str, str] = {}

    for record in payload.get("specifications", []):
        created = await gateway.create(ResourceKind.SPECIFICATION, record)
        spec_ids[str(record.get("u_name"))] = str(created.get("sys_id", ""))
        report.specifications += 1

    for record in payload.get("offerings", []):
        fields = dict(record)
        spec_name = fields.pop("specification", None)
        if spec_name is not None:
            spec_id = spec_ids.get(str(spec_name))
            if not spec_id:
                report.skipped.append(str(fields.get("u_name")))
                continue
            fields[OFFERING_SPEC_REF] = spec_id
            fields[OFFERING_SPEC_NAME] = spec_name
        await gateway.create(ResourceKind.OFFERING, fields)
        report.offerings += 1

    return report
