# src/inkwell/schemas/notification.py
"""Notification-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from inkwell.db.time import as_utc
from inkwell.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Schema for a notification returned to its recipient."""

    id: int
    recipient_id: int
    origin_user_id: int | None
    type: NotificationType
    message: str
    payload: dict[str, Any]
    post_id: int | None
    comment_id: int | None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class NotificationPageResponse(BaseModel):
    """Offset page of notifications."""

    items: list[NotificationResponse]
    current_page: int
    total_pages: int
    total_count: int


class NotificationCursorResponse(BaseModel):
    """Keyset page of notifications."""

    items: list[NotificationResponse]
    next_cursor: int | None


class UnreadCountResponse(BaseModel):
    """Number of unread notifications."""

    count: int


class MarkAllReadResponse(BaseModel):
    """Result of marking every notification read."""

    updated: int
