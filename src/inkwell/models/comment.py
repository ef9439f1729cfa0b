# src/inkwell/models/comment.py
"""SQLAlchemy models for threaded comments."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.db.session import Base
from inkwell.db.time import utcnow


class CommentState(str, enum.Enum):
    """Moderation state of a comment. Any state may move to any other."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Comment(Base):
    """A comment on a post, optionally replying to another comment.

    Threads are kept flat in storage: the parent is an id reference only and the
    nested view is rebuilt on read.
    """

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_post_parent", "post_id", "parent_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=True,
    )
    # Anonymous comments carry no author.
    author_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[CommentState] = mapped_column(
        Enum(
            CommentState,
            name="comment_state",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=CommentState.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
