"""
Main entrypoint for the Blog API.

This module assembles the FastAPI application, sets up logging,
registers error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn::

    uvicorn blog_api.app.main:app --reload

A ``PostStore`` may be passed to ``create_app``; in that case the
caller owns the store and the application never closes it.  Otherwise
the application opens a store on ``settings.database_url`` at startup
and closes it at shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import PostStore
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging


def create_app(settings: Optional[Settings] = None, store: Optional[PostStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use instead of the module‑level defaults.
    store : Optional[PostStore]
        An already opened store to serve posts from.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = PostStore(settings.database_url).open()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        try:
            yield
        finally:
            if owns_store:
                app.state.store.close()
                app.state.store = None

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
