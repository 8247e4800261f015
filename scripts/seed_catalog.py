"""Seed the product catalog API from a local JSON export.

Offerings name their specification through a ``specification`` key holding
the specification's ``u_name``; the created ``sys_id`` is filled in.
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from virtual_agent.core.config import get_settings
from virtual_agent.gateway import HttpResourceGateway
from virtual_agent.gateway.seed import load_seed_file, seed_catalog


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed product specifications and offerings")
    parser.add_argument(
        "--input-file",
        type=Path,
        help="Path to local JSON file with specifications and offerings arrays.",
    )
    parser.add_argument(
        "--base-url",
        default=settings.catalog_api_base_url,
        help="Catalog API base URL.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    payload = load_seed_file(args.input_file)

    gateway = HttpResourceGateway(
        args.base_url,
        specifications_path=settings.specifications_path,
        offerings_path=settings.offerings_path,
        timeout=settings.gateway_timeout_seconds,
    )
    report = asyncio.run(seed_catalog(gateway, payload))

    print(f"Created {report.specifications} specifications and {report.offerings} offerings at {args.base_url}")
    if report.skipped:
        print(f"Skipped offerings with unknown specification: {', '.join(report.skipped)}")


if __name__ == "__main__":
    main()
