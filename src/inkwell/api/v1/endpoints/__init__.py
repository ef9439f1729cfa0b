# src/inkwell/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .likes import router as likes_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .realtime import router as realtime_router

__all__ = [
    "posts_router",
    "comments_router",
    "likes_router",
    "notifications_router",
    "realtime_router",
]
