# mypy: ignore-errors
# tests/v1/test_posts_api.py
"""Tests for post-related endpoints."""

from fastapi import status

from tests.support import AUTHOR_ID, OTHER_USER_ID


def _payload(category, tags, **overrides):
    data = {
        "title": "Hola Mundo",
        "body": "Hello **world**",
        "category_id": category.id,
        "tag_ids": [tags[0].id],
    }
    data.update(overrides)
    return data


def test_create_post(client, author_headers, category, tags, hub) -> None:
    response = client.post("/api/v1/posts/", json=_payload(category, tags), headers=author_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["slug"] == "hola-mundo"
    assert data["author_id"] == AUTHOR_ID
    assert data["body"] == "<p>Hello <strong>world</strong></p>"
    assert [tag["id"] for tag in data["tags"]] == [tags[0].id]
    assert data["created_at"].endswith("Z") or data["created_at"].endswith("+00:00")
    assert hub.pushes_for(AUTHOR_ID)[0]["type"] == "NewPost"


def test_second_post_with_same_title_gets_suffix(client, author_headers, category, tags) -> None:
    client.post("/api/v1/posts/", json=_payload(category, tags), headers=author_headers)
    response = client.post("/api/v1/posts/", json=_payload(category, tags), headers=author_headers)
    assert response.json()["slug"] == "hola-mundo-1"


def test_create_post_requires_auth(client, category, tags) -> None:
    response = client.post(
        "/api/v1/posts/",
        json=_payload(category, tags),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_post_invalid_input(client, author_headers, category, tags) -> None:
    response = client.post(
        "/api/v1/posts/",
        json=_payload(category, tags, tag_ids=[tags[0].id, 9999]),
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_post_dangerous_content(client, author_headers, category, tags) -> None:
    response = client.post(
        "/api/v1/posts/",
        json=_payload(category, tags, body="[x](javascript:alert(1)) javascript:alert(1)"),
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_post_by_id_and_slug(client, test_post) -> None:
    by_id = client.get(f"/api/v1/posts/{test_post.id}")
    by_slug = client.get(f"/api/v1/posts/slug/{test_post.slug}")

    assert by_id.status_code == status.HTTP_200_OK
    assert by_slug.status_code == status.HTTP_200_OK
    assert by_id.json()["id"] == by_slug.json()["id"] == test_post.id


def test_get_missing_post(client) -> None:
    assert client.get("/api/v1/posts/9999").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/posts/slug/nope").status_code == status.HTTP_404_NOT_FOUND


def test_list_posts_paged(client, post_service, category, tags) -> None:
    for n in range(3):
        post_service.create(
            title=f"Post {n}",
            body="Body",
            category_id=category.id,
            tag_ids=[tags[0].id],
            author_id=AUTHOR_ID,
        )

    response = client.get("/api/v1/posts/", params={"page": 1, "page_size": 2})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_count"] == 3
    assert data["total_pages"] == 2
    assert [item["title"] for item in data["items"]] == ["Post 2", "Post 1"]


def test_list_posts_rejects_bad_page(client) -> None:
    response = client.get("/api/v1/posts/", params={"page": 0})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_search_posts(client, test_post) -> None:
    response = client.get("/api/v1/posts/search", params={"q": "MUNDO"})
    assert [item["id"] for item in response.json()] == [test_post.id]


def test_search_posts_escapes_wildcards(client, test_post) -> None:
    for query in ("%", "_"):
        response = client.get("/api/v1/posts/search", params={"q": query})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []


def test_search_posts_paged(client, test_post) -> None:
    response = client.get(
        "/api/v1/posts/search/paged", params={"q": "hola", "page": 1, "page_size": 5}
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_count"] == 1
    assert [item["id"] for item in data["items"]] == [test_post.id]

    bad = client.get("/api/v1/posts/search/paged", params={"q": "hola", "page_size": 0})
    assert bad.status_code == status.HTTP_400_BAD_REQUEST


def test_list_posts_cursor(client, post_service, category, tags) -> None:
    created = [
        post_service.create(
            title=f"Post {n}",
            body="Body",
            category_id=category.id,
            tag_ids=[tags[0].id],
            author_id=AUTHOR_ID,
        )
        for n in range(3)
    ]

    first = client.get("/api/v1/posts/cursor", params={"limit": 2}).json()
    assert [item["id"] for item in first["items"]] == [created[0].id, created[1].id]

    second = client.get(
        "/api/v1/posts/cursor", params={"limit": 2, "after": first["next_cursor"]}
    ).json()
    assert [item["id"] for item in second["items"]] == [created[2].id]
    assert second["next_cursor"] is None

    bad = client.get("/api/v1/posts/cursor", params={"limit": 1000})
    assert bad.status_code == status.HTTP_400_BAD_REQUEST


def test_list_posts_by_category(client, test_post, category) -> None:
    by_id = client.get(f"/api/v1/posts/category/{category.id}")
    by_slug = client.get(f"/api/v1/posts/category/slug/{category.slug}")

    assert [item["id"] for item in by_id.json()] == [test_post.id]
    assert [item["id"] for item in by_slug.json()] == [test_post.id]
    assert client.get("/api/v1/posts/category/slug/nope").json() == []


def test_list_posts_by_tag(client, test_post, tags) -> None:
    by_id = client.get(f"/api/v1/posts/tag/{tags[1].id}")
    by_name = client.get("/api/v1/posts/tag/name/Python")

    assert [item["id"] for item in by_id.json()] == [test_post.id]
    assert [item["id"] for item in by_name.json()] == [test_post.id]
    assert client.get(f"/api/v1/posts/tag/{tags[2].id}").json() == []


def test_list_posts_by_author(client, test_post) -> None:
    mine = client.get(f"/api/v1/posts/author/{AUTHOR_ID}")

    assert [item["id"] for item in mine.json()] == [test_post.id]
    assert client.get(f"/api/v1/posts/author/{OTHER_USER_ID}").json() == []



def test_update_post_by_owner(client, author_headers, test_post, category, tags) -> None:
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json=_payload(category, tags, title="New Title", tag_ids=[tags[2].id]),
        headers=author_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "New Title"
    assert data["slug"] == "new-title"
    assert [tag["id"] for tag in data["tags"]] == [tags[2].id]


def test_update_ignores_author_reassignment(client, author_headers, test_post, category, tags) -> None:
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json=_payload(category, tags, author_id=OTHER_USER_ID),
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["author_id"] == AUTHOR_ID


def test_update_post_by_stranger(client, other_headers, test_post, category, tags) -> None:
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json=_payload(category, tags, title="Hijacked"),
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert client.get(f"/api/v1/posts/{test_post.id}").json()["title"] == "Hola Mundo"


def test_update_post_by_editor(client, editor_headers, test_post, category, tags) -> None:
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json=_payload(category, tags, title="Edited"),
        headers=editor_headers,
    )
    assert response.status_code == status.HTTP_200_OK


def test_update_missing_post(client, author_headers, category, tags) -> None:
    response = client.put(
        "/api/v1/posts/9999",
        json=_payload(category, tags),
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_post(client, author_headers, other_headers, test_post) -> None:
    forbidden = client.delete(f"/api/v1/posts/{test_post.id}", headers=other_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/posts/{test_post.id}", headers=author_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND

    again = client.delete(f"/api/v1/posts/{test_post.id}", headers=author_headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND
