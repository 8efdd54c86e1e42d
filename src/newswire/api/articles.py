"""Article API routes.

Learn: Routes handle HTTP concerns (status codes, error responses) and
delegate to ArticleService. The service commits and then broadcasts,
so connected SSE clients see every change made through these routes.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from newswire.db.engine import get_db
from newswire.realtime.broadcaster import EventBroadcaster, get_broadcaster
from newswire.schemas.article import (
    ArticleCreate,
    ArticleDeleted,
    ArticleRead,
    ArticleUpdate,
)
from newswire.services.article_service import ArticleService

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> ArticleService:
    return ArticleService(db, broadcaster)


@router.get("/articles", response_model=list[ArticleRead])
async def list_articles(svc: ArticleService = Depends(_svc)):
    """Non-expired articles, newest first."""
    return await svc.list_articles()


@router.post("/articles", response_model=ArticleRead, status_code=201)
async def create_article(body: ArticleCreate, svc: ArticleService = Depends(_svc)):
    return await svc.create_article(**body.model_dump())


@router.get("/articles/{article_id}", response_model=ArticleRead)
async def get_article(article_id: int, svc: ArticleService = Depends(_svc)):
    article = await svc.get_article(article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    if article.is_expired():
        raise HTTPException(status_code=410, detail="Article expired")
    return article


@router.put("/articles/{article_id}", response_model=ArticleRead)
async def update_article(
    article_id: int,
    body: ArticleUpdate,
    svc: ArticleService = Depends(_svc),
):
    article = await svc.update_article(article_id, body.model_dump(exclude_unset=True))
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.delete("/articles/{article_id}", response_model=ArticleDeleted)
async def delete_article(article_id: int, svc: ArticleService = Depends(_svc)):
    if not await svc.delete_article(article_id):
        raise HTTPException(status_code=404, detail="Article not found")
    return {"message": "Article deleted successfully"}
