# src/inkwell/schemas/comment.py
"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkwell.db.time import as_utc
from inkwell.models.comment import CommentState


class CommentCreate(BaseModel):
    """Schema for posting a comment or a reply."""

    post_id: int
    body: str = Field(..., max_length=5000)
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentStateUpdate(BaseModel):
    """Schema for a moderation decision."""

    state: CommentState


class CommentResponse(BaseModel):
    """Flat comment as returned by create and moderation listings."""

    id: int
    post_id: int
    parent_id: int | None
    author_id: int | None
    body: str
    state: CommentState
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class CommentThreadResponse(CommentResponse):
    """Comment with its whole reply tree nested under ``replies``."""

    replies: list[CommentThreadResponse] = Field(default_factory=list)


CommentThreadResponse.model_rebuild()
