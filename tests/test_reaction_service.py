# tests/test_reaction_service.py
"""Tests for like toggling on posts and comments."""

import pytest

from inkwell.models import SubjectType
from inkwell.services.errors import NotFoundError
from tests.support import AUTHOR_ID, EDITOR_ID, OTHER_USER_ID


def test_like_is_idempotent(reaction_service, test_post) -> None:
    first = reaction_service.like(test_post.id, SubjectType.POST, OTHER_USER_ID)
    second = reaction_service.like(test_post.id, SubjectType.POST, OTHER_USER_ID)

    assert first.changed is True
    assert first.total_likes == 1
    assert first.user_has_liked is True
    assert second.changed is False
    assert second.total_likes == 1


def test_counts_are_recomputed_from_rows(reaction_service, test_post) -> None:
    for user_id in (AUTHOR_ID, OTHER_USER_ID, EDITOR_ID):
        reaction_service.like(test_post.id, SubjectType.POST, user_id)

    summary = reaction_service.unlike(test_post.id, SubjectType.POST, OTHER_USER_ID)

    assert summary.total_likes == 2
    assert summary.user_has_liked is False
    assert reaction_service.count(test_post.id, SubjectType.POST) == 2


def test_unlike_without_like_is_noop(reaction_service, test_post) -> None:
    summary = reaction_service.unlike(test_post.id, SubjectType.POST, OTHER_USER_ID)
    assert summary.changed is False
    assert summary.total_likes == 0


def test_comment_and_post_likes_are_separate(reaction_service, comment_service, test_post) -> None:
    comment = comment_service.create(post_id=test_post.id, body="Nice", author_id=AUTHOR_ID)

    reaction_service.like(comment.id, SubjectType.COMMENT, OTHER_USER_ID)

    assert reaction_service.summary(comment.id, SubjectType.COMMENT, OTHER_USER_ID).total_likes == 1
    assert reaction_service.summary(test_post.id, SubjectType.POST, OTHER_USER_ID).total_likes == 0


def test_subject_owner(reaction_service, comment_service, test_post) -> None:
    comment = comment_service.create(post_id=test_post.id, body="Nice", author_id=OTHER_USER_ID)
    assert reaction_service.subject_owner(test_post.id, SubjectType.POST) == AUTHOR_ID
    assert reaction_service.subject_owner(comment.id, SubjectType.COMMENT) == OTHER_USER_ID


@pytest.mark.parametrize("subject_type", [SubjectType.POST, SubjectType.COMMENT])
def test_missing_subject(reaction_service, subject_type) -> None:
    with pytest.raises(NotFoundError):
        reaction_service.like(555, subject_type, OTHER_USER_ID)
    with pytest.raises(NotFoundError):
        reaction_service.summary(555, subject_type, OTHER_USER_ID)
