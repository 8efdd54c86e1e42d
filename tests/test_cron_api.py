"""Cleanup endpoint tests — bearer secret and expired-row deletion."""

from datetime import timedelta

import pytest

from newswire.config import settings
from newswire.db.models import Article, utcnow


@pytest.fixture()
def cron_secret(monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")
    return "s3cret"


async def _add_stale(db_session):
    now = utcnow()
    db_session.add(Article(
        title="stale",
        content="c",
        author="a",
        created_at=now - timedelta(days=9),
        updated_at=now - timedelta(days=9),
        expires_at=now - timedelta(days=2),
    ))
    await db_session.commit()


@pytest.mark.asyncio
async def test_cleanup_requires_secret(client, cron_secret):
    r = await client.get("/api/v1/cron/cleanup")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_cleanup_rejects_wrong_secret(client, cron_secret):
    r = await client.get(
        "/api/v1/cron/cleanup",
        headers={"Authorization": "Bearer nope"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_cleanup_closed_without_configured_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "")
    r = await client.get(
        "/api/v1/cron/cleanup",
        headers={"Authorization": "Bearer "},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_cleanup_deletes_expired(client, db_session, cron_secret):
    await _add_stale(db_session)
    r = await client.post(
        "/api/v1/articles",
        json={"title": "fresh", "content": "c", "author": "a"},
    )
    fresh_id = r.json()["id"]

    r = await client.get(
        "/api/v1/cron/cleanup",
        headers={"Authorization": f"Bearer {cron_secret}"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["deleted_count"] == 1
    assert "timestamp" in data

    r = await client.get(f"/api/v1/articles/{fresh_id}")
    assert r.status_code == 200
