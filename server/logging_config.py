"""Logging setup for the form relay service."""

from __future__ import annotations

import logging
import os

APP_LOGGER = "formrelay"

logger = logging.getLogger(f"{APP_LOGGER}.server")


def configure_logging() -> None:
    """Apply LOG_LEVEL to the service loggers.

    The root handler is only installed when nothing else (uvicorn, pytest)
    has configured logging yet; the level is applied either way.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    logging.getLogger(APP_LOGGER).setLevel(level)

    # Suppress noisy HTTP client logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
