"""Error types and outcome codes shared by the content services."""

from __future__ import annotations

import enum


class InkwellError(Exception):
    """Base exception for service-level failures."""

    def __init__(self, message: str, code: str = "inkwell_error") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidInputError(InkwellError):
    """Malformed fields, unknown references or dangerous content."""

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message, "invalid_input")


class NotFoundError(InkwellError):
    """A referenced post, comment or notification does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, "not_found")


class SlugConflictError(InkwellError):
    """Another writer claimed the resolved slug first. Recovered by retrying."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Slug already taken: {slug}", "slug_conflict")


class MutationResult(enum.Enum):
    """Outcome of an update or delete keyed by an id.

    Only ``OK`` is truthy, so callers interested purely in success can treat the
    result as a boolean while routers still tell 404 from 403.
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"

    def __bool__(self) -> bool:
        return self is MutationResult.OK
