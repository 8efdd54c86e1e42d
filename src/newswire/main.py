"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (database engine).
Middleware, CORS, and routers all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newswire import __version__
from newswire.api import api_router
from newswire.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: The connection registry is created at import time and lives for
    the whole process, so there is nothing to start for real-time delivery.
    """
    logger.info(
        "newswire.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        heartbeat_interval=settings.heartbeat_interval_seconds,
    )

    yield

    from newswire.realtime.registry import get_registry

    logger.info("newswire.shutdown", open_streams=get_registry().count)

    from newswire.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Newswire",
        description="News articles with real-time updates over Server-Sent Events",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from newswire.middleware.request_id import RequestIdMiddleware
    from newswire.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: newswire.main:app)
app = create_app()
