"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import Session

from inkwell.models.post import Category, Post, Tag

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def get_by_slug(self, slug: str) -> Post | None:
        """Return the post owning ``slug``."""
        result = self.session.execute(select(Post).where(Post.slug == slug))
        return result.scalars().first()

    def slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        """Return whether any post other than ``exclude_id`` already uses ``slug``."""
        stmt = select(Post.id).where(Post.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Post.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def get_category(self, category_id: int) -> Category | None:
        """Return a category by identifier."""
        return self.session.get(Category, category_id)

    def get_tags(self, tag_ids: list[int]) -> list[Tag]:
        """Return the tags matching ``tag_ids``, ordered by id. Unknown ids are skipped."""
        if not tag_ids:
            return []
        result = self.session.execute(
            select(Tag).where(Tag.id.in_(tag_ids)).order_by(Tag.id)
        )
        return list(result.scalars())

    def count(self) -> int:
        """Return the total number of posts."""
        return self.session.execute(select(func.count(Post.id))).scalar_one()

    def list_page(self, offset: int, limit: int) -> list[Post]:
        """Return posts newest first, sliced for offset pagination."""
        result = self.session.execute(
            select(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().unique())

    def search(self, text: str) -> list[Post]:
        """Return posts whose title or body contains ``text``, case-insensitively."""
        result = self.session.execute(
            self._newest_first(select(Post).where(self._matches(text)))
        )
        return list(result.scalars().unique())

    def count_search(self, text: str) -> int:
        """Return how many posts ``search`` would return for ``text``."""
        stmt = select(func.count(Post.id)).where(self._matches(text))
        return self.session.execute(stmt).scalar_one()

    def search_page(self, text: str, offset: int, limit: int) -> list[Post]:
        """Return one offset page of ``search`` results."""
        stmt = self._newest_first(select(Post).where(self._matches(text)))
        result = self.session.execute(stmt.offset(offset).limit(limit))
        return list(result.scalars().unique())

    def list_by_category(self, category_id: int) -> list[Post]:
        """Return posts filed under ``category_id``, newest first."""
        stmt = select(Post).where(Post.category_id == category_id)
        return list(self.session.execute(self._newest_first(stmt)).scalars().unique())

    def list_by_category_slug(self, slug: str) -> list[Post]:
        """Return posts whose category has ``slug``, newest first."""
        stmt = select(Post).where(Post.category.has(Category.slug == slug))
        return list(self.session.execute(self._newest_first(stmt)).scalars().unique())

    def list_by_tag(self, tag_id: int) -> list[Post]:
        """Return posts carrying the tag ``tag_id``, newest first."""
        stmt = select(Post).where(Post.tags.any(Tag.id == tag_id))
        return list(self.session.execute(self._newest_first(stmt)).scalars().unique())

    def list_by_tag_name(self, name: str) -> list[Post]:
        """Return posts carrying a tag named ``name``, ignoring case."""
        stmt = select(Post).where(Post.tags.any(func.lower(Tag.name) == name.lower()))
        return list(self.session.execute(self._newest_first(stmt)).scalars().unique())

    def list_by_author(self, author_id: int) -> list[Post]:
        """Return posts owned by ``author_id``, newest first."""
        stmt = select(Post).where(Post.author_id == author_id)
        return list(self.session.execute(self._newest_first(stmt)).scalars().unique())

    def list_after(self, after: int | None, limit: int) -> list[Post]:
        """Return up to ``limit`` posts with an id greater than ``after``, oldest first."""
        stmt = select(Post).order_by(Post.id)
        if after is not None:
            stmt = stmt.where(Post.id > after)
        return list(self.session.execute(stmt.limit(limit)).scalars().unique())

    @staticmethod
    def _matches(text: str) -> ColumnElement[bool]:
        # autoescape keeps % and _ in the query literal
        return or_(
            Post.title.icontains(text, autoescape=True),
            Post.body.icontains(text, autoescape=True),
        )

    @staticmethod
    def _newest_first(stmt: Select[tuple[Post]]) -> Select[tuple[Post]]:
        return stmt.order_by(Post.created_at.desc(), Post.id.desc())
