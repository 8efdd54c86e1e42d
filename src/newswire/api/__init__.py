"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.
The article and event routes are public; only the cleanup job checks
a bearer secret, inside its own handler.
"""

from fastapi import APIRouter

from newswire.api.articles import router as articles_router
from newswire.api.cron import router as cron_router
from newswire.api.health import router as health_router
from newswire.realtime.sse import router as events_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(articles_router, tags=["articles"])
api_router.include_router(events_router, tags=["realtime"])
api_router.include_router(cron_router, tags=["cron"])
