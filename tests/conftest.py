# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from inkwell.core.security import create_access_token
from inkwell.db.session import Base, enable_sqlite_savepoints
from inkwell.db.session import get_db as app_get_session
from inkwell.main import app as fastapi_app
from inkwell.models import Category, Post, Tag
from inkwell.services.comment_service import CommentService
from inkwell.services.hub import get_hub
from inkwell.services.notification_service import NotificationService
from inkwell.services.post_service import PostService
from inkwell.services.reaction_service import ReactionService
from tests.support import AUTHOR_ID, EDITOR_ID, OTHER_USER_ID, RecordingHub

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def hub() -> RecordingHub:
    return RecordingHub()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(app: FastAPI, db_session: Session, hub: RecordingHub) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_hub] = lambda: hub
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_hub, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_headers() -> Callable[..., dict[str, str]]:
    """Return a factory building bearer headers for any user and roles."""

    def _make(user_id: int, roles: tuple[str, ...] = ()) -> dict[str, str]:
        token = create_access_token(user_id, roles)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def author_headers(make_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return make_headers(AUTHOR_ID)


@pytest.fixture()
def other_headers(make_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return make_headers(OTHER_USER_ID)


@pytest.fixture()
def editor_headers(make_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return make_headers(EDITOR_ID, ("editor",))


@pytest.fixture()
def category(db_session: Session) -> Category:
    category = Category(name="News", slug="news")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture()
def tags(db_session: Session) -> list[Tag]:
    tags = [Tag(name="python"), Tag(name="web"), Tag(name="databases")]
    db_session.add_all(tags)
    db_session.commit()
    return tags


@pytest.fixture()
def post_service(db_session: Session) -> PostService:
    return PostService(db_session)


@pytest.fixture()
def comment_service(db_session: Session) -> CommentService:
    return CommentService(db_session)


@pytest.fixture()
def reaction_service(db_session: Session) -> ReactionService:
    return ReactionService(db_session)


@pytest.fixture()
def notification_service(db_session: Session, hub: RecordingHub) -> NotificationService:
    return NotificationService(db_session, hub)


@pytest.fixture()
def test_post(post_service: PostService, category: Category, tags: list[Tag]) -> Post:
    """Create a persisted post owned by the primary test user."""
    return post_service.create(
        title="Hola Mundo",
        body="First **post** body",
        category_id=category.id,
        tag_ids=[tags[0].id, tags[1].id],
        author_id=AUTHOR_ID,
    )
