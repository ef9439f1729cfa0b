# src/inkwell/models/__init__.py
"""SQLAlchemy models for the Inkwell application."""

from .comment import Comment, CommentState
from .notification import Notification, NotificationType
from .post import Category, Post, Tag, post_tag
from .reaction import Reaction, SubjectType

__all__ = [
    "Category", "Post", "Tag", "post_tag",
    "Comment", "CommentState",
    "Notification", "NotificationType",
    "Reaction", "SubjectType",
]
