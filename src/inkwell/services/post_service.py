"""Service-level orchestration for creating, updating and deleting posts."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inkwell.core.settings import settings
from inkwell.db.time import utcnow
from inkwell.models import Comment, Post, Reaction, SubjectType, Tag
from inkwell.repositories.post_repo import PostRepository
from inkwell.services import sanitizer, slugs
from inkwell.services.authorization import Actor, can_mutate
from inkwell.services.errors import InvalidInputError, MutationResult, SlugConflictError
from inkwell.services.pagination import (
    CursorPage,
    Page,
    check_cursor_limit,
    check_page_request,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostDraft:
    """Validated and sanitized field set ready to be written to a post."""

    title: str
    body: str
    category_id: int
    tags: list[Tag]


class PostService:
    """Create, update and delete posts with validation, slugs and ownership checks."""

    def __init__(self, db: Session, repo: PostRepository | None = None) -> None:
        self.db = db
        self.repo = repo or PostRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, post_id: int) -> Post | None:
        return self.repo.get_by_id(post_id)

    def get_by_slug(self, slug: str) -> Post | None:
        return self.repo.get_by_slug(slug)

    def list_paged(self, page: int, page_size: int) -> Page[Post]:
        """Return posts newest first using 1-indexed offset pagination."""
        offset = check_page_request(page, page_size)
        return Page(
            items=self.repo.list_page(offset, page_size),
            current_page=page,
            page_size=page_size,
            total_count=self.repo.count(),
        )

    def search(self, text: str) -> list[Post]:
        """Return posts whose title or body mentions ``text``."""
        needle = text.strip()
        if not needle:
            return []
        return self.repo.search(needle)

    def search_paged(self, text: str, page: int, page_size: int) -> Page[Post]:
        """Offset-paginated variant of `search`. Blank text yields an empty page."""
        offset = check_page_request(page, page_size)
        needle = text.strip()
        if not needle:
            return Page(items=[], current_page=page, page_size=page_size, total_count=0)
        return Page(
            items=self.repo.search_page(needle, offset, page_size),
            current_page=page,
            page_size=page_size,
            total_count=self.repo.count_search(needle),
        )

    def list_by_category(self, category_id: int) -> list[Post]:
        return self.repo.list_by_category(category_id)

    def list_by_category_slug(self, slug: str) -> list[Post]:
        return self.repo.list_by_category_slug(slug)

    def list_by_tag(self, tag_id: int) -> list[Post]:
        return self.repo.list_by_tag(tag_id)

    def list_by_tag_name(self, name: str) -> list[Post]:
        needle = name.strip()
        if not needle:
            return []
        return self.repo.list_by_tag_name(needle)

    def list_by_author(self, author_id: int) -> list[Post]:
        return self.repo.list_by_author(author_id)

    def list_after(self, after: int | None = None, limit: int | None = None) -> CursorPage[Post]:
        """Return posts with an id greater than ``after``, oldest first."""
        limit = check_cursor_limit(limit)
        # Fetch one extra row to learn whether another page exists.
        rows = self.repo.list_after(after, limit + 1)

        next_cursor = None
        if len(rows) > limit:
            rows = rows[:limit]
            next_cursor = rows[-1].id
        return CursorPage(items=rows, next_cursor=next_cursor)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        title: str,
        body: str,
        category_id: int,
        tag_ids: list[int] | None,
        author_id: int,
    ) -> Post:
        """Validate, sanitize and persist a new post with a unique slug.

        Raises:
            InvalidInputError: On missing fields, unknown category or tags,
                dangerous content, or when no unique slug could be stored.
        """
        draft = self._prepare(title, body, category_id, tag_ids)
        post = Post(author_id=author_id)
        self._store(post, draft, regenerate_slug=True)
        self.db.commit()
        logger.info("Post %s created by user %s with slug %s", post.id, author_id, post.slug)
        return post

    def update(
        self,
        post_id: int,
        *,
        title: str,
        body: str,
        category_id: int,
        tag_ids: list[int] | None,
        actor: Actor,
        author_id: int | None = None,
    ) -> MutationResult:
        """Overwrite a post's content, category and tags.

        The stored owner is the only one consulted for authorization and is never
        changed; a differing ``author_id`` in the request is ignored.
        """
        post = self.repo.get_by_id(post_id)
        if post is None:
            return MutationResult.NOT_FOUND

        draft = self._prepare(title, body, category_id, tag_ids)

        if not can_mutate(actor.user_id, post.author_id, actor.elevated):
            logger.info("User %s may not update post %s", actor.user_id, post_id)
            return MutationResult.FORBIDDEN

        if author_id is not None and author_id != post.author_id:
            logger.warning(
                "Ignoring attempt by user %s to reassign post %s to user %s",
                actor.user_id,
                post_id,
                author_id,
            )

        title_changed = draft.title != post.title
        self._store(post, draft, regenerate_slug=title_changed)
        self.db.commit()
        return MutationResult.OK

    def delete(self, post_id: int, *, actor: Actor) -> MutationResult:
        """Remove a post with its tag links, comments and likes."""
        post = self.repo.get_by_id(post_id)
        if post is None:
            return MutationResult.NOT_FOUND

        if not can_mutate(actor.user_id, post.author_id, actor.elevated):
            logger.info("User %s may not delete post %s", actor.user_id, post_id)
            return MutationResult.FORBIDDEN

        comment_ids = list(
            self.db.execute(select(Comment.id).where(Comment.post_id == post_id)).scalars()
        )
        reaction_filter = (Reaction.subject_type == SubjectType.POST) & (
            Reaction.subject_id == post_id
        )
        if comment_ids:
            reaction_filter = or_(
                reaction_filter,
                (Reaction.subject_type == SubjectType.COMMENT)
                & Reaction.subject_id.in_(comment_ids),
            )
        self.db.execute(delete(Reaction).where(reaction_filter))
        self.db.execute(delete(Comment).where(Comment.post_id == post_id))
        self.db.delete(post)
        self.db.commit()
        logger.info(
            "Post %s deleted by user %s (%d comments removed)",
            post_id,
            actor.user_id,
            len(comment_ids),
        )
        return MutationResult.OK

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _prepare(
        self,
        title: str | None,
        body: str | None,
        category_id: int | None,
        tag_ids: list[int] | None,
    ) -> PostDraft:
        if title is None or not title.strip():
            raise InvalidInputError("Title is required")
        if body is None or not body.strip():
            raise InvalidInputError("Body is required")
        if category_id is None or category_id <= 0:
            raise InvalidInputError("Category is invalid")
        if tag_ids is None:
            raise InvalidInputError("Tag list must not be null")
        if not tag_ids:
            raise InvalidInputError("At least one tag is required")
        if any(tag_id <= 0 for tag_id in tag_ids):
            raise InvalidInputError("Every tag must have a valid id")
        if len(set(tag_ids)) != len(tag_ids):
            raise InvalidInputError("Tag list contains duplicates")

        if self.repo.get_category(category_id) is None:
            raise InvalidInputError("Category does not exist")
        tags = self.repo.get_tags(tag_ids)
        if len(tags) != len(tag_ids):
            raise InvalidInputError("One or more tags do not exist")

        clean_title = sanitizer.sanitize_plain_text(title)
        clean_body = sanitizer.sanitize_markdown(body)
        if not clean_title or not clean_body:
            raise InvalidInputError("Title and body must contain text")
        if sanitizer.contains_dangerous_pattern(
            clean_title
        ) or sanitizer.contains_dangerous_pattern(clean_body):
            logger.warning("Rejected post with disallowed content: %r", clean_title)
            raise InvalidInputError("Content contains disallowed elements")

        return PostDraft(
            title=clean_title,
            body=clean_body,
            category_id=category_id,
            tags=tags,
        )

    def _store(self, post: Post, draft: PostDraft, *, regenerate_slug: bool) -> None:
        """Write ``draft`` onto ``post`` and flush, retrying lost slug races.

        Each attempt runs in a savepoint; when the unique constraint rejects the
        slug, that attempt is rolled back and resolution starts over.
        """
        base = slugs.resolve(draft.title) if regenerate_slug else None
        if regenerate_slug and not base:
            raise InvalidInputError("Title does not contain any characters usable in a slug")

        attempts = settings.slug_max_attempts
        for attempt in range(1, attempts + 1):
            try:
                self._flush_attempt(post, draft, base)
            except SlugConflictError as err:
                logger.info(
                    "Slug %s was claimed concurrently (attempt %d/%d)",
                    err.slug,
                    attempt,
                    attempts,
                )
                continue
            return

        raise InvalidInputError("Could not allocate a unique slug, please retry")

    def _flush_attempt(self, post: Post, draft: PostDraft, base: str | None) -> None:
        now = utcnow()
        slug = post.slug
        try:
            with self.db.begin_nested():
                if base is not None:
                    with self.db.no_autoflush:
                        slug = slugs.first_available(
                            base,
                            lambda candidate: self.repo.slug_taken(candidate, exclude_id=post.id),
                        )
                    post.slug = slug
                post.title = draft.title
                post.body = draft.body
                post.category_id = draft.category_id
                # Replace, never merge, the tag set.
                post.tags.clear()
                post.tags.extend(draft.tags)
                if post.id is None:
                    post.created_at = now
                post.updated_at = now
                self.db.add(post)
                self.db.flush()
        except IntegrityError as err:
            if "slug" not in str(err.orig).lower():
                raise
            raise SlugConflictError(slug) from err
