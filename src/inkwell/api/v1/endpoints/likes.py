# src/inkwell/api/v1/endpoints/likes.py
"""Like endpoints for posts and comments."""

from fastapi import APIRouter

from inkwell.models import SubjectType
from inkwell.schemas.reaction import LikeResponse
from inkwell.services.activity import announce_like
from inkwell.services.errors import InkwellError
from inkwell.services.notification_service import NotificationService
from inkwell.services.reaction_service import ReactionService

from ..dependencies import (
    CurrentActorDep,
    NotificationServiceDep,
    ReactionServiceDep,
    http_error,
)

router = APIRouter(prefix="/likes", tags=["likes"])


async def _like(
    reactions: ReactionService,
    notifications: NotificationService,
    subject_id: int,
    subject_type: SubjectType,
    user_id: int,
) -> LikeResponse:
    try:
        owner_id = reactions.subject_owner(subject_id, subject_type)
        summary = reactions.like(subject_id, subject_type, user_id)
    except InkwellError as err:
        raise http_error(err) from err

    await announce_like(notifications, summary, owner_id)
    return LikeResponse.model_validate(summary)


def _unlike(
    reactions: ReactionService,
    subject_id: int,
    subject_type: SubjectType,
    user_id: int,
) -> LikeResponse:
    try:
        summary = reactions.unlike(subject_id, subject_type, user_id)
    except InkwellError as err:
        raise http_error(err) from err
    return LikeResponse.model_validate(summary)


@router.post("/posts/{post_id}", response_model=LikeResponse)
async def like_post(
    post_id: int,
    current_actor: CurrentActorDep,
    reactions: ReactionServiceDep,
    notifications: NotificationServiceDep,
) -> LikeResponse:
    """Like a post. Liking again changes nothing."""
    return await _like(reactions, notifications, post_id, SubjectType.POST, current_actor.user_id)


@router.delete("/posts/{post_id}", response_model=LikeResponse)
async def unlike_post(
    post_id: int,
    current_actor: CurrentActorDep,
    reactions: ReactionServiceDep,
) -> LikeResponse:
    """Withdraw a like from a post."""
    return _unlike(reactions, post_id, SubjectType.POST, current_actor.user_id)


@router.post("/comments/{comment_id}", response_model=LikeResponse)
async def like_comment(
    comment_id: int,
    current_actor: CurrentActorDep,
    reactions: ReactionServiceDep,
    notifications: NotificationServiceDep,
) -> LikeResponse:
    """Like a comment. Liking again changes nothing."""
    return await _like(
        reactions, notifications, comment_id, SubjectType.COMMENT, current_actor.user_id
    )


@router.delete("/comments/{comment_id}", response_model=LikeResponse)
async def unlike_comment(
    comment_id: int,
    current_actor: CurrentActorDep,
    reactions: ReactionServiceDep,
) -> LikeResponse:
    """Withdraw a like from a comment."""
    return _unlike(reactions, comment_id, SubjectType.COMMENT, current_actor.user_id)


@router.get("/{subject_type}/{subject_id}", response_model=LikeResponse)
async def get_like_summary(
    subject_type: SubjectType,
    subject_id: int,
    current_actor: CurrentActorDep,
    reactions: ReactionServiceDep,
) -> LikeResponse:
    """Total likes on a post or comment and whether the caller is among them."""
    try:
        summary = reactions.summary(subject_id, subject_type, current_actor.user_id)
    except InkwellError as err:
        raise http_error(err) from err
    return LikeResponse.model_validate(summary)
