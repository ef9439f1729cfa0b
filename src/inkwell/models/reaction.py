# src/inkwell/models/reaction.py
"""Models capturing likes on posts and comments."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.db.session import Base
from inkwell.db.time import utcnow


class SubjectType(str, enum.Enum):
    """Kind of content a reaction points at."""

    POST = "post"
    COMMENT = "comment"


class Reaction(Base):
    """Per-user like on a post or comment.

    The subject is polymorphic, so there is no foreign key; rows are removed by
    the services that delete the subject.
    """

    __tablename__ = "reaction"
    __table_args__ = (
        Index("ix_reaction_subject", "subject_type", "subject_id"),
    )

    # Composite primary key prevents duplicate likes from the same user.
    subject_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    subject_type: Mapped[SubjectType] = mapped_column(
        Enum(
            SubjectType,
            name="reaction_subject_type",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
