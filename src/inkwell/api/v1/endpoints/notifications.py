# src/inkwell/api/v1/endpoints/notifications.py
"""Notification inbox endpoints for the Inkwell API."""

from fastapi import APIRouter, Query, Response, status

from inkwell.core.settings import settings
from inkwell.schemas.notification import (
    MarkAllReadResponse,
    NotificationCursorResponse,
    NotificationPageResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from inkwell.services.errors import InkwellError

from ..dependencies import CurrentActorDep, NotificationServiceDep, ensure_ok, http_error

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> list[NotificationResponse]:
    """All of the caller's notifications, newest first."""
    return [
        NotificationResponse.model_validate(item)
        for item in notifications.list_for_user(current_actor.user_id)
    ]


@router.get("/unread", response_model=list[NotificationResponse])
async def list_unread_notifications(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> list[NotificationResponse]:
    """The caller's unread notifications, newest first."""
    return [
        NotificationResponse.model_validate(item)
        for item in notifications.list_unread(current_actor.user_id)
    ]


@router.get("/unread/count", response_model=UnreadCountResponse)
async def count_unread_notifications(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(count=notifications.unread_count(current_actor.user_id))


@router.get("/paged", response_model=NotificationPageResponse)
async def list_notifications_paged(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
    page: int = Query(1, description="1-indexed page number"),
    page_size: int = Query(settings.default_page_size, description="Notifications per page"),
) -> NotificationPageResponse:
    """One page of the caller's notifications, newest first."""
    try:
        result = notifications.list_paged(current_actor.user_id, page, page_size)
    except InkwellError as err:
        raise http_error(err) from err

    return NotificationPageResponse(
        items=[NotificationResponse.model_validate(item) for item in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )


@router.get("/cursor", response_model=NotificationCursorResponse)
async def list_notifications_after(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
    after: int | None = Query(None, description="Return notifications older than this id"),
    limit: int | None = Query(None, description="Maximum number of notifications"),
) -> NotificationCursorResponse:
    """Keyset-paginated notifications, stable while new ones arrive."""
    try:
        result = notifications.list_after(current_actor.user_id, after=after, limit=limit)
    except InkwellError as err:
        raise http_error(err) from err

    return NotificationCursorResponse(
        items=[NotificationResponse.model_validate(item) for item in result.items],
        next_cursor=result.next_cursor,
    )


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=notifications.mark_all_read(current_actor.user_id))


@router.patch("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: int,
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> Response:
    """Mark one of the caller's notifications read."""
    ensure_ok(notifications.mark_read(notification_id, current_actor.user_id), "Notification")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_actor: CurrentActorDep,
    notifications: NotificationServiceDep,
) -> Response:
    """Delete one of the caller's notifications."""
    ensure_ok(notifications.delete(notification_id, current_actor.user_id), "Notification")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
