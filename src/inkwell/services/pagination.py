"""Offset and cursor page containers shared by list operations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from inkwell.core.settings import settings
from inkwell.services.errors import InvalidInputError

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of an offset-paginated listing. Pages are 1-indexed."""

    items: list[T]
    current_page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)


@dataclass(frozen=True)
class CursorPage(Generic[T]):
    """One slice of a keyset-paginated listing.

    ``next_cursor`` is the id to pass as ``after`` for the following slice, or
    None once the listing is exhausted.
    """

    items: list[T] = field(default_factory=list)
    next_cursor: int | None = None


def total_pages(total_count: int, page_size: int) -> int:
    """Return ``ceil(total_count / page_size)``."""
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def check_page_request(page: int, page_size: int) -> int:
    """Validate a page request and return its offset."""
    if page < 1:
        raise InvalidInputError("Page numbers start at 1")
    if page_size < 1 or page_size > settings.max_page_size:
        raise InvalidInputError(
            f"Page size must be between 1 and {settings.max_page_size}"
        )
    return (page - 1) * page_size


def check_cursor_limit(limit: int | None) -> int:
    """Validate a keyset page size, falling back to the configured default."""
    limit = limit or settings.default_page_size
    if limit < 1 or limit > settings.max_page_size:
        raise InvalidInputError(f"Limit must be between 1 and {settings.max_page_size}")
    return limit
