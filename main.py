"""Entry point: `python main.py` or `uvicorn main:app`."""

from __future__ import annotations

from server.app import app
from server.config import get_settings

__all__ = ["app"]


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
