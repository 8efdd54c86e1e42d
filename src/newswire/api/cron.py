"""Scheduled cleanup endpoint.

Learn: An external scheduler (platform cron, systemd timer, k8s CronJob)
calls GET /api/v1/cron/cleanup with `Authorization: Bearer <secret>`.
The secret is compared in constant time. With no secret configured the
endpoint is closed.
"""

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from newswire.config import settings
from newswire.db.engine import get_db
from newswire.db.models import utcnow
from newswire.schemas.article import CleanupResult
from newswire.services.article_service import ArticleService

router = APIRouter()


def _verify_cron_secret(authorization: str | None = Header(default=None)) -> None:
    expected = settings.cron_secret
    if not expected or not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not hmac.compare_digest(authorization.encode(), f"Bearer {expected}".encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get(
    "/cron/cleanup",
    response_model=CleanupResult,
    dependencies=[Depends(_verify_cron_secret)],
)
async def cleanup_expired_articles(db: AsyncSession = Depends(get_db)):
    """Delete all articles whose expiry has passed."""
    now = utcnow()
    deleted = await ArticleService(db).delete_expired(now)
    return {"success": True, "deleted_count": deleted, "timestamp": now}
