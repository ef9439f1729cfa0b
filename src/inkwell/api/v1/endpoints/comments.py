# src/inkwell/api/v1/endpoints/comments.py
"""Comment and moderation endpoints for the Inkwell API."""

from fastapi import APIRouter, HTTPException, Response, status

from inkwell.models import CommentState
from inkwell.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentStateUpdate,
    CommentThreadResponse,
)
from inkwell.services.activity import announce_comment, announce_moderation
from inkwell.services.errors import InkwellError

from ..dependencies import (
    CommentServiceDep,
    CurrentActorDep,
    ElevatedActorDep,
    NotificationServiceDep,
    PostServiceDep,
    ensure_ok,
    http_error,
)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_actor: CurrentActorDep,
    comments: CommentServiceDep,
    posts: PostServiceDep,
    notifications: NotificationServiceDep,
) -> CommentResponse:
    """Comment on a post or reply to an existing comment.

    New comments start out pending moderation.
    """
    try:
        comment = comments.create(
            post_id=comment_data.post_id,
            body=comment_data.body,
            author_id=current_actor.user_id,
            parent_id=comment_data.parent_id,
        )
    except InkwellError as err:
        raise http_error(err) from err

    response = CommentResponse.model_validate(comment)
    post = posts.get(comment.post_id)
    parent = comments.get(comment.parent_id) if comment.parent_id is not None else None
    if post is not None:
        await announce_comment(notifications, comment, post, parent)
    return response


@router.get("/post/{post_id}", response_model=list[CommentThreadResponse])
async def list_post_comments(
    post_id: int,
    comments: CommentServiceDep,
    posts: PostServiceDep,
) -> list[CommentThreadResponse]:
    """Return the post's comment threads, newest thread first."""
    if posts.get(post_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return [CommentThreadResponse.model_validate(node) for node in comments.list_roots(post_id)]


@router.get("/state/{state}", response_model=list[CommentResponse])
async def list_comments_by_state(
    state: CommentState,
    _moderator: ElevatedActorDep,
    comments: CommentServiceDep,
) -> list[CommentResponse]:
    """Moderation queue: every comment in ``state``, oldest first."""
    return [CommentResponse.model_validate(comment) for comment in comments.list_by_state(state)]


@router.patch("/{comment_id}/state", response_model=CommentResponse)
async def change_comment_state(
    comment_id: int,
    state_data: CommentStateUpdate,
    moderator: ElevatedActorDep,
    comments: CommentServiceDep,
    notifications: NotificationServiceDep,
) -> CommentResponse:
    """Approve, reject or re-queue a comment."""
    try:
        result = comments.change_state(comment_id, state_data.state)
    except InkwellError as err:
        raise http_error(err) from err
    ensure_ok(result, "Comment")

    comment = comments.get(comment_id)
    response = CommentResponse.model_validate(comment)
    await announce_moderation(notifications, comment, moderator.user_id)
    return response


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    current_actor: CurrentActorDep,
    comments: CommentServiceDep,
) -> Response:
    """Delete a comment together with all of its replies."""
    ensure_ok(comments.delete(comment_id, actor=current_actor), "Comment")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
