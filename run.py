"""Entry point for the Kanban API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from ``HOST`` and ``PORT`` (defaults ``0.0.0.0`` and ``3000``); the
Supabase credentials must be present in the environment, see
``kanban_api/app/core/config.py`` for the full list of variables.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from kanban_api.app.core.config import settings
from kanban_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Kanban API stopped")
