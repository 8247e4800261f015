"""Launch script that starts Uvicorn with the configured log level."""

from __future__ import annotations

import logging
import os

import uvicorn

from virtual_agent.core.config import get_settings

logger = logging.getLogger("va.launcher")


def main() -> None:
    settings = get_settings()
    port = int(os.environ.get("PORT", "8000"))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.debug("Starting %s on %s:%s", settings.app_name, host, port)
    uvicorn.run(
        "virtual_agent.main:app",
        host=host,
        port=port,
        log_level=str(settings.log_level).lower(),
    )


if __name__ == "__main__":
    main()
