"""Turn successful content mutations into notifications.

Each helper decides who, if anyone, should hear about an event and emits at
most one notification. Nobody is notified about their own actions.
"""
from __future__ import annotations

from inkwell.models import Comment, CommentState, Notification, NotificationType, Post, SubjectType
from inkwell.services.notification_service import NotificationService
from inkwell.services.reaction_service import ReactionSummary

_PREVIEW_LENGTH = 80


def _preview(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= _PREVIEW_LENGTH:
        return text
    return text[: _PREVIEW_LENGTH - 1].rstrip() + "…"


def _should_notify(recipient_id: int | None, actor_id: int | None) -> bool:
    return recipient_id is not None and recipient_id != actor_id


async def announce_post(notifications: NotificationService, post: Post) -> Notification:
    """Confirm publication to the author (system-originated)."""
    return await notifications.emit(
        post.author_id,
        None,
        NotificationType.NEW_POST,
        f"You published a new post: {post.title}",
        {"post_id": post.id, "slug": post.slug},
        post_id=post.id,
    )


async def announce_comment(
    notifications: NotificationService,
    comment: Comment,
    post: Post,
    parent: Comment | None = None,
) -> Notification | None:
    """Tell the parent comment's author about a reply, or the post author about a new comment.

    Replies only ever reach the parent's author, even when the post author is
    someone else.
    """
    if parent is not None:
        if not _should_notify(parent.author_id, comment.author_id):
            return None
        return await notifications.emit(
            parent.author_id,
            comment.author_id,
            NotificationType.REPLY_TO_COMMENT,
            f"Someone replied to your comment: {_preview(comment.body)}",
            {"post_id": post.id, "comment_id": comment.id, "parent_comment_id": parent.id},
            post_id=post.id,
            comment_id=comment.id,
        )

    if not _should_notify(post.author_id, comment.author_id):
        return None
    return await notifications.emit(
        post.author_id,
        comment.author_id,
        NotificationType.NEW_COMMENT,
        f"New comment on your post '{post.title}': {_preview(comment.body)}",
        {"post_id": post.id, "comment_id": comment.id},
        post_id=post.id,
        comment_id=comment.id,
    )


async def announce_like(
    notifications: NotificationService,
    summary: ReactionSummary,
    owner_id: int | None,
) -> Notification | None:
    """Tell the owner about a new like. Repeated and self likes stay silent."""
    if not summary.changed or not summary.user_has_liked:
        return None
    if not _should_notify(owner_id, summary.user_id):
        return None

    if summary.subject_type is SubjectType.POST:
        return await notifications.emit(
            owner_id,
            summary.user_id,
            NotificationType.LIKE_ON_POST,
            f"User {summary.user_id} liked your post.",
            {"post_id": summary.subject_id, "origin_user_id": summary.user_id},
            post_id=summary.subject_id,
        )
    return await notifications.emit(
        owner_id,
        summary.user_id,
        NotificationType.LIKE_ON_COMMENT,
        f"User {summary.user_id} liked your comment.",
        {"comment_id": summary.subject_id, "origin_user_id": summary.user_id},
        comment_id=summary.subject_id,
    )


async def announce_moderation(
    notifications: NotificationService,
    comment: Comment,
    moderator_id: int,
) -> Notification | None:
    """Tell a comment's author that a moderator changed its state."""
    if not _should_notify(comment.author_id, moderator_id):
        return None
    state = CommentState(comment.state)
    return await notifications.emit(
        comment.author_id,
        moderator_id,
        NotificationType.MODERATION,
        f"Your comment is now {state.value}.",
        {"comment_id": comment.id, "post_id": comment.post_id, "state": state.value},
        post_id=comment.post_id,
        comment_id=comment.id,
    )
