# src/inkwell/models/notification.py
"""SQLAlchemy model for per-user notifications."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.db.session import Base
from inkwell.db.time import utcnow


class NotificationType(str, enum.Enum):
    """Event kinds that produce a notification."""

    NEW_POST = "NewPost"
    NEW_COMMENT = "NewComment"
    REPLY_TO_COMMENT = "ReplyToComment"
    LIKE_ON_POST = "LikeOnPost"
    LIKE_ON_COMMENT = "LikeOnComment"
    MODERATION = "Moderation"
    SYSTEM = "System"
    PRIVATE_MESSAGE = "PrivateMessage"


class Notification(Base):
    """A notification owned by its recipient.

    Only the recipient may read, mark or delete it. The read flag only ever
    moves from false to true.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL for system-generated notifications.
    origin_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    type: Mapped[NotificationType] = mapped_column(
        Enum(
            NotificationType,
            name="notification_type",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    post_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
