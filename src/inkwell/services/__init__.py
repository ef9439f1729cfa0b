"""Business logic services for the Inkwell application."""

from .comment_service import CommentNode, CommentService
from .errors import InkwellError, InvalidInputError, MutationResult, NotFoundError
from .hub import ConnectionManager, get_hub
from .notification_service import NotificationService
from .post_service import PostService
from .reaction_service import ReactionService, ReactionSummary

__all__ = [
    "CommentNode",
    "CommentService",
    "ConnectionManager",
    "InkwellError",
    "InvalidInputError",
    "MutationResult",
    "NotFoundError",
    "NotificationService",
    "PostService",
    "ReactionService",
    "ReactionSummary",
    "get_hub",
]
