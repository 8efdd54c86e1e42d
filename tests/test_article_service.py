"""ArticleService tests — best-effort publishing and expiry cleanup."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from newswire.db.models import Article, utcnow
from newswire.services.article_service import ArticleService

from fakes import ExplodingBroadcaster


@pytest.mark.asyncio
async def test_publish_failure_never_fails_the_mutation(db_session, registry):
    svc = ArticleService(db_session, ExplodingBroadcaster(registry))

    article = await svc.create_article(title="t", content="c", author="a")
    assert article.id is not None

    updated = await svc.update_article(article.id, {"title": "t2"})
    assert updated.title == "t2"

    assert await svc.delete_article(article.id) is True
    assert await svc.get_article(article.id) is None


@pytest.mark.asyncio
async def test_delete_expired_removes_only_stale_rows(db_session, broadcaster, listener):
    svc = ArticleService(db_session, broadcaster)
    fresh = await svc.create_article(title="fresh", content="c", author="a")

    now = utcnow()
    db_session.add(Article(
        title="stale",
        content="c",
        author="a",
        created_at=now - timedelta(days=10),
        updated_at=now - timedelta(days=10),
        expires_at=now - timedelta(days=3),
    ))
    await db_session.commit()
    listener.frames.clear()

    deleted = await svc.delete_expired(now)

    assert deleted == 1
    result = await db_session.execute(select(Article.title))
    assert result.scalars().all() == ["fresh"]
    assert fresh.id is not None
    # Housekeeping deletes are not broadcast
    assert listener.frames == []


@pytest.mark.asyncio
async def test_list_hides_expired(db_session, broadcaster):
    svc = ArticleService(db_session, broadcaster)
    await svc.create_article(title="live", content="c", author="a")

    later = utcnow() + timedelta(days=8)
    assert await svc.list_articles(now=later) == []
    assert [a.title for a in await svc.list_articles()] == ["live"]
