"""Notification persistence, read state and real-time delivery.

Emitting a notification is two steps. The row is committed first and is the
source of truth; the hub push that follows is a convenience. A push that fails
or times out is logged and dropped, never surfaced to the caller, so a user who
was offline still finds the notification through the listing operations.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from inkwell.core.settings import settings
from inkwell.db.time import as_utc, utcnow
from inkwell.models import Notification, NotificationType
from inkwell.services.errors import InvalidInputError, MutationResult
from inkwell.services.hub import RealtimeHub
from inkwell.services.pagination import (
    CursorPage,
    Page,
    check_cursor_limit,
    check_page_request,
)

logger = logging.getLogger(__name__)

PUSH_EVENT_NAME = "notification"


def to_event(notification: Notification) -> dict[str, Any]:
    """Serialize a notification into the payload pushed to clients."""
    return {
        "id": notification.id,
        "type": notification.type.value,
        "message": notification.message,
        "payload": dict(notification.payload or {}),
        "origin_user_id": notification.origin_user_id,
        "post_id": notification.post_id,
        "comment_id": notification.comment_id,
        "is_read": notification.is_read,
        "created_at": as_utc(notification.created_at).isoformat(),
    }


class NotificationService:
    """Service storing, listing and delivering user notifications."""

    def __init__(self, db: Session, hub: RealtimeHub | None = None) -> None:
        self.db = db
        self.hub = hub

    async def emit(
        self,
        recipient_id: int,
        origin_user_id: int | None,
        type_: NotificationType | str,
        message: str,
        payload: Mapping[str, Any] | None = None,
        *,
        post_id: int | None = None,
        comment_id: int | None = None,
    ) -> Notification:
        """Persist a notification for ``recipient_id`` and push it if they are online."""
        try:
            kind = NotificationType(type_)
        except ValueError as err:
            raise InvalidInputError(f"Unknown notification type: {type_!r}") from err
        if recipient_id <= 0:
            raise InvalidInputError("Recipient is invalid")

        notification = Notification(
            recipient_id=recipient_id,
            origin_user_id=origin_user_id or None,
            type=kind,
            message=message,
            payload=dict(payload or {}),
            post_id=post_id,
            comment_id=comment_id,
            is_read=False,
            created_at=utcnow(),
        )
        self.db.add(notification)
        self.db.commit()

        await self._push(notification)
        return notification

    async def _push(self, notification: Notification) -> None:
        if self.hub is None:
            return
        try:
            await asyncio.wait_for(
                self.hub.push_to_user(
                    notification.recipient_id,
                    PUSH_EVENT_NAME,
                    to_event(notification),
                ),
                timeout=settings.hub_push_timeout_seconds,
            )
        except Exception as err:  # noqa: BLE001
            logger.warning(
                "Push of notification %s to user %s failed: %r",
                notification.id,
                notification.recipient_id,
                err,
            )

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_for_user(self, user_id: int) -> list[Notification]:
        """Return every notification of ``user_id``, newest first."""
        return list(self.db.execute(self._owned(user_id)).scalars())

    def list_unread(self, user_id: int) -> list[Notification]:
        """Return unread notifications of ``user_id``, newest first."""
        stmt = self._owned(user_id).where(Notification.is_read.is_(False))
        return list(self.db.execute(stmt).scalars())

    def unread_count(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.recipient_id == user_id,
                Notification.is_read.is_(False),
            )
        ).scalar_one()

    def list_paged(self, user_id: int, page: int, page_size: int) -> Page[Notification]:
        """Return one 1-indexed page of ``user_id``'s notifications, newest first.

        Offsets are not stabilized against concurrent inserts.
        """
        offset = check_page_request(page, page_size)
        total = self.db.execute(
            select(func.count(Notification.id)).where(Notification.recipient_id == user_id)
        ).scalar_one()
        items = list(
            self.db.execute(self._owned(user_id).offset(offset).limit(page_size)).scalars()
        )
        return Page(items=items, current_page=page, page_size=page_size, total_count=total)

    def list_after(
        self,
        user_id: int,
        after: int | None = None,
        limit: int | None = None,
    ) -> CursorPage[Notification]:
        """Return notifications older than the ``after`` id, newest first."""
        limit = check_cursor_limit(limit)

        stmt = (
            select(Notification)
            .where(Notification.recipient_id == user_id)
            .order_by(Notification.id.desc())
        )
        if after is not None:
            stmt = stmt.where(Notification.id < after)
        # Fetch one extra row to learn whether another page exists.
        rows = list(self.db.execute(stmt.limit(limit + 1)).scalars())

        next_cursor = None
        if len(rows) > limit:
            rows = rows[:limit]
            next_cursor = rows[-1].id
        return CursorPage(items=rows, next_cursor=next_cursor)

    # ------------------------------------------------------------------
    # Read state and removal
    # ------------------------------------------------------------------

    def mark_read(self, notification_id: int, user_id: int) -> MutationResult:
        """Mark one notification read. Only its recipient may do so."""
        notification, result = self._load_owned(notification_id, user_id)
        if notification is None:
            return result
        if not notification.is_read:
            notification.is_read = True
            self.db.commit()
        return MutationResult.OK

    def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification of ``user_id`` read; return how many changed."""
        result = self.db.execute(
            update(Notification)
            .where(
                Notification.recipient_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return result.rowcount or 0

    def delete(self, notification_id: int, user_id: int) -> MutationResult:
        """Delete a notification on behalf of its recipient."""
        notification, result = self._load_owned(notification_id, user_id)
        if notification is None:
            return result
        self.db.delete(notification)
        self.db.commit()
        return MutationResult.OK

    def _owned(self, user_id: int):  # noqa: ANN202
        return (
            select(Notification)
            .where(Notification.recipient_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )

    def _load_owned(
        self,
        notification_id: int,
        user_id: int,
    ) -> tuple[Notification | None, MutationResult]:
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            return None, MutationResult.NOT_FOUND
        if notification.recipient_id != user_id:
            logger.warning(
                "User %s tried to modify notification %s owned by user %s",
                user_id,
                notification_id,
                notification.recipient_id,
            )
            return None, MutationResult.FORBIDDEN
        return notification, MutationResult.OK
