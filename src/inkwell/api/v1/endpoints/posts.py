# src/inkwell/api/v1/endpoints/posts.py
"""Post-related endpoints for the Inkwell API."""

from fastapi import APIRouter, HTTPException, Query, Response, status

from inkwell.core.settings import settings
from inkwell.models import Post
from inkwell.schemas.post import (
    PostCreate,
    PostCursorResponse,
    PostPageResponse,
    PostResponse,
    PostUpdate,
)
from inkwell.services.activity import announce_post
from inkwell.services.errors import InkwellError
from inkwell.services.pagination import Page

from ..dependencies import (
    CurrentActorDep,
    NotificationServiceDep,
    PostServiceDep,
    ensure_ok,
    http_error,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_actor: CurrentActorDep,
    posts: PostServiceDep,
    notifications: NotificationServiceDep,
) -> PostResponse:
    """Publish a new post owned by the caller.

    The title and body are sanitized and a unique slug is derived from the
    title. The author receives a confirmation notification.
    """
    try:
        post = posts.create(
            title=post_data.title,
            body=post_data.body,
            category_id=post_data.category_id,
            tag_ids=post_data.tag_ids,
            author_id=current_actor.user_id,
        )
    except InkwellError as err:
        raise http_error(err) from err

    response = PostResponse.model_validate(post)
    await announce_post(notifications, post)
    return response


@router.get("/", response_model=PostPageResponse)
async def list_posts(
    posts: PostServiceDep,
    page: int = Query(1, description="1-indexed page number"),
    page_size: int = Query(settings.default_page_size, description="Posts per page"),
) -> PostPageResponse:
    """List posts newest first."""
    try:
        result = posts.list_paged(page, page_size)
    except InkwellError as err:
        raise http_error(err) from err

    return _page_response(result)


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    posts: PostServiceDep,
    q: str = Query("", description="Text to look for in titles and bodies"),
) -> list[PostResponse]:
    """Case-insensitive substring search over titles and bodies."""
    return [PostResponse.model_validate(post) for post in posts.search(q)]


@router.get("/search/paged", response_model=PostPageResponse)
async def search_posts_paged(
    posts: PostServiceDep,
    q: str = Query("", description="Text to look for in titles and bodies"),
    page: int = Query(1, description="1-indexed page number"),
    page_size: int = Query(settings.default_page_size, description="Posts per page"),
) -> PostPageResponse:
    """Offset-paginated search, newest first."""
    try:
        result = posts.search_paged(q, page, page_size)
    except InkwellError as err:
        raise http_error(err) from err

    return _page_response(result)


@router.get("/cursor", response_model=PostCursorResponse)
async def list_posts_after(
    posts: PostServiceDep,
    after: int | None = Query(None, description="Return posts with a greater id"),
    limit: int | None = Query(None, description="Maximum number of posts"),
) -> PostCursorResponse:
    """List posts oldest first using keyset pagination."""
    try:
        result = posts.list_after(after, limit)
    except InkwellError as err:
        raise http_error(err) from err

    return PostCursorResponse(
        items=[PostResponse.model_validate(post) for post in result.items],
        next_cursor=result.next_cursor,
    )


@router.get("/category/{category_id}", response_model=list[PostResponse])
async def list_posts_by_category(category_id: int, posts: PostServiceDep) -> list[PostResponse]:
    """List posts filed under a category."""
    return [PostResponse.model_validate(post) for post in posts.list_by_category(category_id)]


@router.get("/category/slug/{slug}", response_model=list[PostResponse])
async def list_posts_by_category_slug(slug: str, posts: PostServiceDep) -> list[PostResponse]:
    """List posts filed under the category with ``slug``."""
    return [PostResponse.model_validate(post) for post in posts.list_by_category_slug(slug)]


@router.get("/tag/{tag_id}", response_model=list[PostResponse])
async def list_posts_by_tag(tag_id: int, posts: PostServiceDep) -> list[PostResponse]:
    """List posts carrying a tag."""
    return [PostResponse.model_validate(post) for post in posts.list_by_tag(tag_id)]


@router.get("/tag/name/{name}", response_model=list[PostResponse])
async def list_posts_by_tag_name(name: str, posts: PostServiceDep) -> list[PostResponse]:
    """List posts carrying a tag with this name, ignoring case."""
    return [PostResponse.model_validate(post) for post in posts.list_by_tag_name(name)]


@router.get("/author/{author_id}", response_model=list[PostResponse])
async def list_posts_by_author(author_id: int, posts: PostServiceDep) -> list[PostResponse]:
    """List posts owned by a user."""
    return [PostResponse.model_validate(post) for post in posts.list_by_author(author_id)]


@router.get("/slug/{slug}", response_model=PostResponse)
async def get_post_by_slug(slug: str, posts: PostServiceDep) -> PostResponse:
    """Fetch a post by its slug."""
    post = posts.get_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, posts: PostServiceDep) -> PostResponse:
    """Fetch a post by id."""
    post = posts.get(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_actor: CurrentActorDep,
    posts: PostServiceDep,
) -> PostResponse:
    """Replace a post's content. Only the owner or an elevated user may do so."""
    try:
        result = posts.update(
            post_id,
            title=post_data.title,
            body=post_data.body,
            category_id=post_data.category_id,
            tag_ids=post_data.tag_ids,
            actor=current_actor,
            author_id=post_data.author_id,
        )
    except InkwellError as err:
        raise http_error(err) from err

    ensure_ok(result, "Post")
    return PostResponse.model_validate(posts.get(post_id))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_actor: CurrentActorDep,
    posts: PostServiceDep,
) -> Response:
    """Delete a post along with its comments and likes."""
    ensure_ok(posts.delete(post_id, actor=current_actor), "Post")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _page_response(result: Page[Post]) -> PostPageResponse:
    return PostPageResponse(
        items=[PostResponse.model_validate(post) for post in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )
