# mypy: ignore-errors
# tests/v1/test_likes_api.py
"""Tests for like endpoints."""

from fastapi import status

from tests.support import AUTHOR_ID, OTHER_USER_ID


def test_like_post_notifies_owner_once(client, other_headers, test_post, hub) -> None:
    first = client.post(f"/api/v1/likes/posts/{test_post.id}", headers=other_headers)
    second = client.post(f"/api/v1/likes/posts/{test_post.id}", headers=other_headers)

    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {
        "subject_id": test_post.id,
        "subject_type": "post",
        "user_id": OTHER_USER_ID,
        "total_likes": 1,
        "user_has_liked": True,
    }
    assert second.json()["total_likes"] == 1
    assert [push["type"] for push in hub.pushes_for(AUTHOR_ID)] == ["LikeOnPost"]


def test_self_like_is_silent(client, author_headers, test_post, hub) -> None:
    client.post(f"/api/v1/likes/posts/{test_post.id}", headers=author_headers)
    assert hub.pushes_for(AUTHOR_ID) == []


def test_unlike_post(client, other_headers, test_post) -> None:
    client.post(f"/api/v1/likes/posts/{test_post.id}", headers=other_headers)

    response = client.delete(f"/api/v1/likes/posts/{test_post.id}", headers=other_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total_likes"] == 0
    assert response.json()["user_has_liked"] is False


def test_like_comment(client, author_headers, other_headers, comment_service, test_post, hub) -> None:
    comment = comment_service.create(post_id=test_post.id, body="Hi", author_id=OTHER_USER_ID)

    response = client.post(f"/api/v1/likes/comments/{comment.id}", headers=author_headers)

    assert response.json()["subject_type"] == "comment"
    assert [push["type"] for push in hub.pushes_for(OTHER_USER_ID)] == ["LikeOnComment"]

    summary = client.get(f"/api/v1/likes/comment/{comment.id}", headers=other_headers)
    assert summary.json()["total_likes"] == 1
    assert summary.json()["user_has_liked"] is False

    removed = client.delete(f"/api/v1/likes/comments/{comment.id}", headers=author_headers)
    assert removed.json()["total_likes"] == 0


def test_like_summary_for_post(client, other_headers, test_post) -> None:
    client.post(f"/api/v1/likes/posts/{test_post.id}", headers=other_headers)
    response = client.get(f"/api/v1/likes/post/{test_post.id}", headers=other_headers)
    assert response.json()["user_has_liked"] is True


def test_like_missing_subject(client, other_headers) -> None:
    assert client.post("/api/v1/likes/posts/9999", headers=other_headers).status_code == 404
    assert client.post("/api/v1/likes/comments/9999", headers=other_headers).status_code == 404
    assert client.get("/api/v1/likes/post/9999", headers=other_headers).status_code == 404


def test_like_unknown_subject_type(client, other_headers) -> None:
    response = client.get("/api/v1/likes/photo/1", headers=other_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
