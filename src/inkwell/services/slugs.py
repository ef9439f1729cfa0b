"""Slug derivation for post titles."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Iterator

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def resolve(title: str) -> str:
    """Return the candidate base slug for ``title``.

    The result is lowercase, ASCII, hyphen separated and never starts, ends or
    doubles a hyphen. It may be empty when the title has no usable characters.
    Uniqueness is the caller's concern.
    """
    text = unicodedata.normalize("NFKD", title.lower().strip())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub("-", text)
    text = _HYPHENS.sub("-", text)
    return text.strip("-")


def candidates(base: str) -> Iterator[str]:
    """Yield ``base``, ``base-1``, ``base-2`` and so on."""
    yield base
    counter = 1
    while True:
        yield f"{base}-{counter}"
        counter += 1


def first_available(base: str, is_taken: Callable[[str], bool]) -> str:
    """Probe candidates in order and return the first one not taken."""
    for candidate in candidates(base):
        if not is_taken(candidate):
            return candidate
    raise AssertionError("unreachable")  # pragma: no cover
