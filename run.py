"""Entry point for the FitCoach Pro API server.

Starts the FastAPI application with Uvicorn.  Host and port are read
from the environment variables ``HOST`` and ``PORT``; defaults are
``0.0.0.0`` and ``3000``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from fitcoach_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info", log_config=None)
    server = Server(config)
    logging.getLogger(__name__).info("Starting FitCoach Pro API on %s:%s", host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
