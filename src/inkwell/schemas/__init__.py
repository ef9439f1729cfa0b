# src/inkwell/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentStateUpdate, CommentThreadResponse
from .notification import (
    MarkAllReadResponse,
    NotificationCursorResponse,
    NotificationPageResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from .post import (
    PostCreate,
    PostCursorResponse,
    PostPageResponse,
    PostResponse,
    PostUpdate,
    TagResponse,
)
from .reaction import LikeResponse

__all__ = [
    "CommentCreate", "CommentResponse", "CommentStateUpdate", "CommentThreadResponse",
    "MarkAllReadResponse", "NotificationCursorResponse", "NotificationPageResponse",
    "NotificationResponse", "UnreadCountResponse",
    "PostCreate", "PostCursorResponse", "PostPageResponse", "PostResponse", "PostUpdate", "TagResponse",
    "LikeResponse",
]
