"""Pydantic schemas for articles.

Learn: Pydantic v2 models validate request/response data. Separate
"Create"/"Update" schemas (input) from the "Read" schema (output).
ArticleRead is also the payload shape of article:created/article:updated
events, so the stream and the REST API agree on field names.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CATEGORY = "Other"


class ArticleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(default=DEFAULT_CATEGORY, max_length=50)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    source_url: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("category")
    @classmethod
    def default_category(cls, v: Optional[str]) -> str:
        return v or DEFAULT_CATEGORY


class ArticleUpdate(BaseModel):
    """Partial update — only fields present in the request body change."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = Field(default=None, min_length=1)
    author: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    source_url: Optional[str] = Field(default=None, max_length=2048)


class ArticleRead(BaseModel):
    id: int
    title: str
    content: str
    author: str
    category: str
    image_url: Optional[str]
    source_url: Optional[str]
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    model_config = {"from_attributes": True}


class ArticleDeleted(BaseModel):
    message: str


class CleanupResult(BaseModel):
    success: bool
    deleted_count: int
    timestamp: datetime
