"""Idempotent like toggles for posts and comments."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inkwell.db.time import utcnow
from inkwell.models import Comment, Post, Reaction, SubjectType
from inkwell.services.errors import NotFoundError


@dataclass(frozen=True)
class ReactionSummary:
    """Like state of a subject as seen by one user.

    ``changed`` tells whether the call actually inserted or removed a row.
    """

    subject_id: int
    subject_type: SubjectType
    user_id: int
    total_likes: int
    user_has_liked: bool
    changed: bool = False


class ReactionService:
    """Service toggling likes; counts are always recomputed from stored rows."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def subject_owner(self, subject_id: int, subject_type: SubjectType) -> int | None:
        """Return the author of the liked subject.

        Raises:
            NotFoundError: If the post or comment does not exist.
        """
        if subject_type is SubjectType.POST:
            post = self.db.get(Post, subject_id)
            if post is None:
                raise NotFoundError("Post not found")
            return post.author_id
        comment = self.db.get(Comment, subject_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment.author_id

    def like(self, subject_id: int, subject_type: SubjectType, user_id: int) -> ReactionSummary:
        """Record a like; liking twice leaves a single row."""
        self.subject_owner(subject_id, subject_type)
        changed = False
        if self._find(subject_id, subject_type, user_id) is None:
            try:
                with self.db.begin_nested():
                    self.db.add(
                        Reaction(
                            subject_id=subject_id,
                            subject_type=subject_type,
                            user_id=user_id,
                            created_at=utcnow(),
                        )
                    )
                    self.db.flush()
                changed = True
            except IntegrityError:
                # A concurrent request stored the same like first.
                changed = False
            self.db.commit()
        return self._summary(subject_id, subject_type, user_id, changed=changed)

    def unlike(self, subject_id: int, subject_type: SubjectType, user_id: int) -> ReactionSummary:
        """Remove a like; unliking something not liked is a no-op."""
        self.subject_owner(subject_id, subject_type)
        existing = self._find(subject_id, subject_type, user_id)
        changed = existing is not None
        if existing is not None:
            self.db.delete(existing)
            self.db.commit()
        return self._summary(subject_id, subject_type, user_id, changed=changed)

    def summary(self, subject_id: int, subject_type: SubjectType, user_id: int) -> ReactionSummary:
        """Return the like count and whether ``user_id`` liked the subject."""
        self.subject_owner(subject_id, subject_type)
        return self._summary(subject_id, subject_type, user_id)

    def count(self, subject_id: int, subject_type: SubjectType) -> int:
        return self.db.execute(
            select(func.count())
            .select_from(Reaction)
            .where(
                Reaction.subject_id == subject_id,
                Reaction.subject_type == subject_type,
            )
        ).scalar_one()

    def _find(self, subject_id: int, subject_type: SubjectType, user_id: int) -> Reaction | None:
        return self.db.get(Reaction, (subject_id, subject_type, user_id))

    def _summary(
        self,
        subject_id: int,
        subject_type: SubjectType,
        user_id: int,
        *,
        changed: bool = False,
    ) -> ReactionSummary:
        return ReactionSummary(
            subject_id=subject_id,
            subject_type=subject_type,
            user_id=user_id,
            total_likes=self.count(subject_id, subject_type),
            user_has_liked=self._find(subject_id, subject_type, user_id) is not None,
            changed=changed,
        )
