# mypy: ignore-errors
# tests/v1/test_dependencies.py
"""Tests for shared API dependencies."""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from inkwell.api.v1.dependencies import (
    ensure_ok,
    get_current_actor,
    http_error,
    require_elevated,
)
from inkwell.core.security import create_access_token
from inkwell.services.authorization import Actor
from inkwell.services.errors import (
    InvalidInputError,
    MutationResult,
    NotFoundError,
    SlugConflictError,
)


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_get_current_actor_from_token() -> None:
    actor = get_current_actor(_credentials(create_access_token(12, ["admin"])))
    assert actor == Actor(user_id=12, roles=frozenset({"admin"}))


def test_get_current_actor_rejects_bad_token() -> None:
    with pytest.raises(HTTPException) as exc_info:
        get_current_actor(_credentials("bogus"))
    assert exc_info.value.status_code == 401


def test_require_elevated() -> None:
    editor = Actor(user_id=1, roles=frozenset({"editor"}))
    assert require_elevated(editor) is editor
    with pytest.raises(HTTPException) as exc_info:
        require_elevated(Actor(user_id=1))
    assert exc_info.value.status_code == 403


@pytest.mark.parametrize(
    ("result", "status_code"),
    [(MutationResult.NOT_FOUND, 404), (MutationResult.FORBIDDEN, 403)],
)
def test_ensure_ok_maps_failures(result, status_code) -> None:
    with pytest.raises(HTTPException) as exc_info:
        ensure_ok(result, "Post")
    assert exc_info.value.status_code == status_code


def test_ensure_ok_passes_success() -> None:
    ensure_ok(MutationResult.OK, "Post")


def test_http_error_mapping() -> None:
    assert http_error(InvalidInputError("bad")).status_code == 400
    assert http_error(NotFoundError("gone")).status_code == 404
    assert http_error(SlugConflictError("taken")).status_code == 409
