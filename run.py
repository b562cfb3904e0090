"""Entry point for serving the Blog API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables through ``Settings``; the post store location comes from
``DATABASE_URL``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from blog_api.app.core.config import settings
from blog_api.app.main import app


async def main() -> None:
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
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Shutting down")
