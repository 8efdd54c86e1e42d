"""Article service — persistence plus real-time notification.

Learn: Service layer separates business logic from HTTP routing.
Every mutation commits first and then publishes an article:* event.
Publishing is best-effort: a failure is logged and never rolls back or
fails the mutation that triggered it.
"""

from datetime import datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from newswire.config import settings
from newswire.db.models import Article, utcnow
from newswire.events.types import ARTICLE_CREATED, ARTICLE_DELETED, ARTICLE_UPDATED
from newswire.realtime.broadcaster import EventBroadcaster, get_broadcaster
from newswire.schemas.article import ArticleRead

logger = structlog.get_logger()

# Columns that may be cleared by sending null in an update
_NULLABLE_FIELDS = {"image_url", "source_url"}


class ArticleService:
    """Business logic for articles."""

    def __init__(self, db: AsyncSession, broadcaster: EventBroadcaster | None = None):
        self.db = db
        self.broadcaster = broadcaster or get_broadcaster()

    # ─── Reads ──────────────────────────────────────────

    async def list_articles(self, now: datetime | None = None) -> list[Article]:
        """All non-expired articles, newest first."""
        result = await self.db.execute(
            select(Article)
            .where(Article.expires_at >= (now or utcnow()))
            .order_by(Article.created_at.desc(), Article.id.desc())
        )
        return list(result.scalars().all())

    async def get_article(self, article_id: int) -> Article | None:
        """Fetch an article by id, expired or not (callers decide)."""
        return await self.db.get(Article, article_id)

    # ─── Mutations ──────────────────────────────────────

    async def create_article(
        self,
        title: str,
        content: str,
        author: str,
        category: str = "Other",
        image_url: str | None = None,
        source_url: str | None = None,
    ) -> Article:
        now = utcnow()
        article = Article(
            title=title,
            content=content,
            author=author,
            category=category,
            image_url=image_url,
            source_url=source_url,
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(days=settings.article_ttl_days),
        )
        self.db.add(article)
        await self.db.commit()

        logger.info("article.created", article_id=article.id, category=category)
        self._publish(ARTICLE_CREATED, self._record(article))
        return article

    async def update_article(
        self, article_id: int, changes: dict[str, Any]
    ) -> Article | None:
        """Apply a partial update. Returns None if the article doesn't exist.

        None values are ignored except for the optional URL columns,
        where None clears the field.
        """
        article = await self.get_article(article_id)
        if not article:
            return None

        for field, value in changes.items():
            if value is None and field not in _NULLABLE_FIELDS:
                continue
            setattr(article, field, value)
        article.updated_at = utcnow()
        await self.db.commit()

        logger.info("article.updated", article_id=article_id, fields=sorted(changes))
        self._publish(ARTICLE_UPDATED, self._record(article))
        return article

    async def delete_article(self, article_id: int) -> bool:
        """Delete an article. Returns False if it doesn't exist."""
        article = await self.get_article(article_id)
        if not article:
            return False

        await self.db.delete(article)
        await self.db.commit()

        logger.info("article.deleted", article_id=article_id)
        self._publish(ARTICLE_DELETED, {"id": article_id})
        return True

    async def delete_expired(self, now: datetime | None = None) -> int:
        """Remove every article whose expiry is in the past.

        Learn: Expiry cleanup is housekeeping, not a user mutation, so it
        doesn't broadcast. Clients already hide expired articles.
        """
        now = now or utcnow()
        result = await self.db.execute(
            delete(Article)
            .where(Article.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        deleted = result.rowcount or 0
        logger.info("article.cleanup_completed", deleted_count=deleted)
        return deleted

    # ─── Helpers ────────────────────────────────────────

    @staticmethod
    def _record(article: Article) -> dict[str, Any]:
        return ArticleRead.model_validate(article).model_dump(mode="json")

    def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        try:
            self.broadcaster.publish(event_type, payload)
        except Exception:
            logger.exception("article.publish_failed", event_type=event_type)
