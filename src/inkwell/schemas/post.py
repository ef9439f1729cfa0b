# src/inkwell/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkwell.db.time import as_utc


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., max_length=300, description="Plain-text title")
    body: str = Field(..., description="Markdown body")
    category_id: int = Field(..., description="Existing category id")
    tag_ids: list[int] = Field(..., description="Distinct existing tag ids")


class PostUpdate(PostCreate):
    """Schema for replacing a post's content.

    ``author_id`` is accepted only so that ownership-transfer attempts can be
    detected; it is never applied.
    """

    author_id: int | None = Field(None, description="Ignored; ownership cannot change")


class TagResponse(BaseModel):
    """Tag as embedded in post responses."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    body: str
    slug: str
    author_id: int
    category_id: int
    tags: list[TagResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class PostPageResponse(BaseModel):
    """Offset page of posts."""

    items: list[PostResponse]
    current_page: int
    total_pages: int
    total_count: int


class PostCursorResponse(BaseModel):
    """Keyset page of posts."""

    items: list[PostResponse]
    next_cursor: int | None
