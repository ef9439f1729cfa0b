"""Threaded comments: creation, moderation state and subtree deletion."""
from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from inkwell.db.time import utcnow
from inkwell.models import Comment, CommentState, Post, Reaction, SubjectType
from inkwell.services import sanitizer
from inkwell.services.authorization import Actor, can_mutate
from inkwell.services.errors import InvalidInputError, MutationResult, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class CommentNode:
    """Read model of a comment with its replies materialized."""

    id: int
    post_id: int
    parent_id: int | None
    author_id: int | None
    body: str
    state: CommentState
    created_at: datetime
    replies: list[CommentNode] = field(default_factory=list)

    @classmethod
    def from_comment(cls, comment: Comment) -> CommentNode:
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            author_id=comment.author_id,
            body=comment.body,
            state=comment.state,
            created_at=comment.created_at,
        )


def parse_state(value: CommentState | str) -> CommentState:
    """Coerce ``value`` into a `CommentState`, rejecting unknown names."""
    if isinstance(value, CommentState):
        return value
    try:
        return CommentState(str(value).strip().lower())
    except ValueError as err:
        raise InvalidInputError(f"Unknown comment state: {value!r}") from err


class CommentService:
    """Service handling comment threads and their moderation."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, comment_id: int) -> Comment | None:
        return self.db.get(Comment, comment_id)

    def create(
        self,
        *,
        post_id: int,
        body: str,
        author_id: int | None = None,
        parent_id: int | None = None,
    ) -> Comment:
        """Attach a new pending comment to a post, optionally as a reply.

        Raises:
            NotFoundError: If the post does not exist.
            InvalidInputError: If the body is empty or dangerous, or the parent
                is unknown or belongs to another post.
        """
        if self.db.get(Post, post_id) is None:
            raise NotFoundError("Post not found")

        clean_body = sanitizer.sanitize_plain_text(body)
        if not clean_body:
            raise InvalidInputError("Comment body is required")
        if sanitizer.contains_dangerous_pattern(clean_body):
            logger.warning("Rejected comment on post %s with disallowed content", post_id)
            raise InvalidInputError("Content contains disallowed elements")

        if parent_id is not None:
            parent = self.db.get(Comment, parent_id)
            if parent is None:
                raise InvalidInputError("Parent comment does not exist")
            if parent.post_id != post_id:
                raise InvalidInputError("Parent comment belongs to a different post")

        comment = Comment(
            post_id=post_id,
            parent_id=parent_id,
            author_id=author_id,
            body=clean_body,
            state=CommentState.PENDING,
            created_at=utcnow(),
        )
        self.db.add(comment)
        self.db.commit()
        return comment

    def change_state(self, comment_id: int, new_state: CommentState | str) -> MutationResult:
        """Move a comment to any moderation state."""
        state = parse_state(new_state)
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            return MutationResult.NOT_FOUND
        comment.state = state
        self.db.commit()
        return MutationResult.OK

    def delete(self, comment_id: int, *, actor: Actor) -> MutationResult:
        """Delete a comment and every reply beneath it.

        Only the root of the subtree is checked against the actor; descendants
        written by other users go with it.
        """
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            return MutationResult.NOT_FOUND

        if not can_mutate(actor.user_id, comment.author_id, actor.elevated):
            logger.info("User %s may not delete comment %s", actor.user_id, comment_id)
            return MutationResult.FORBIDDEN

        subtree = self._subtree_ids(comment)
        self.db.execute(
            delete(Reaction).where(
                Reaction.subject_type == SubjectType.COMMENT,
                Reaction.subject_id.in_(subtree),
            )
        )
        self.db.execute(
            delete(Comment)
            .where(Comment.id.in_(subtree))
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        logger.info(
            "Comment %s deleted by user %s with %d replies",
            comment_id,
            actor.user_id,
            len(subtree) - 1,
        )
        return MutationResult.OK

    def list_roots(self, post_id: int) -> list[CommentNode]:
        """Return the post's top-level comments newest first, replies nested oldest first."""
        comments = self.db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
        ).scalars()

        nodes: dict[int, CommentNode] = {}
        roots: list[CommentNode] = []
        for comment in comments:
            node = CommentNode.from_comment(comment)
            nodes[node.id] = node
            parent = nodes.get(node.parent_id) if node.parent_id is not None else None
            if parent is None:
                roots.append(node)
            else:
                parent.replies.append(node)
        roots.reverse()
        return roots

    def list_by_state(self, state: CommentState | str) -> list[Comment]:
        """Return comments in ``state``, oldest first (moderation queue order)."""
        wanted = parse_state(state)
        result = self.db.execute(
            select(Comment)
            .where(Comment.state == wanted)
            .order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars())

    def _subtree_ids(self, root: Comment) -> list[int]:
        rows = self.db.execute(
            select(Comment.id, Comment.parent_id).where(Comment.post_id == root.post_id)
        ).all()
        children: dict[int, list[int]] = defaultdict(list)
        for child_id, parent_id in rows:
            if parent_id is not None:
                children[parent_id].append(child_id)

        ordered = [root.id]
        queue = deque([root.id])
        while queue:
            current = queue.popleft()
            for child_id in children[current]:
                ordered.append(child_id)
                queue.append(child_id)
        return ordered
