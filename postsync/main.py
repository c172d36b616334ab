"""Mock posts service entry point.

Wiring only: lifespan, exception handlers, routers. Serves the in-memory
posts service over HTTP with the public posts API shape, so the cache
engine's HTTP adapter can run against it locally.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from postsync.api import api_router
from postsync.core.config import get_settings
from postsync.core.exception_handlers import register_exception_handlers
from postsync.core.lifespan import create_lifespan
from postsync.infrastructure.external.in_memory import InMemoryPostRemoteService
from postsync.shared.telemetry.logging import setup_logging


def create_app(posts_remote: InMemoryPostRemoteService | None = None) -> FastAPI:
    """Build and return the mock service app.

    Args:
        posts_remote: Optional preseeded service; otherwise the lifespan
            creates one with default posts.
    """
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=f"{settings.app_name} mock posts service",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.posts_remote = posts_remote

    register_exception_handlers(app)
    app.include_router(api_router)
    return app
