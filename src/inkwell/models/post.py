# src/inkwell/models/post.py
"""SQLAlchemy models for posts and their taxonomy."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.db.session import Base
from inkwell.db.time import utcnow

post_tag = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """Editorial category a post is filed under."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)


class Tag(Base):
    """Free-form label attached to posts."""

    __tablename__ = "tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)


class Post(Base):
    """Primary content entity published by authors.

    The slug is unique across all posts; the storage constraint is what settles
    two concurrent creates that resolved the same candidate.
    """

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)

    # Owner identity comes from the auth layer; there is no local user table.
    author_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("category.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    category: Mapped[Category] = relationship("Category", lazy="joined")
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary=post_tag,
        order_by=Tag.id,
    )

    @property
    def tag_ids(self) -> list[int]:
        """Return the identifiers of the attached tags in stored order."""
        return [tag.id for tag in self.tags]
