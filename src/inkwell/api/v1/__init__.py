# src/inkwell/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    likes_router,
    notifications_router,
    posts_router,
    realtime_router,
)

__all__ = [
    "posts_router",
    "comments_router",
    "likes_router",
    "notifications_router",
    "realtime_router",
]
