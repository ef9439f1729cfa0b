"""Sanitization of user-submitted text and markup before it is stored.

Three entry points cover the kinds of content the platform accepts:

- plain text (titles, comment bodies): every tag is removed, text is kept;
- markdown (post bodies): rendered to HTML, then sanitized as HTML;
- HTML: reduced to a small allow list of formatting tags.

`contains_dangerous_pattern` is an independent pre-persistence check. It runs on
the sanitized output and a hit rejects the whole mutation instead of storing a
partially cleaned value.
"""

from __future__ import annotations

import html
import re

import bleach
import markdown

ALLOWED_TAGS = frozenset({
    "b", "strong", "i", "em", "u", "p", "br", "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "blockquote", "code", "pre", "a",
})
ALLOWED_ATTRIBUTES = ["href", "title"]
ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

DANGEROUS_PATTERNS = (
    re.compile(r"<\s*script", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"\bon(?:error|load)\s*=", re.IGNORECASE),
    re.compile(r"<\s*iframe", re.IGNORECASE),
    re.compile(r"<\s*svg", re.IGNORECASE),
)

# Entity-encoded markup can nest; each round peels one layer.
MAX_PLAIN_TEXT_ROUNDS = 5

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


def sanitize_html(value: str | None) -> str:
    """Drop every tag, attribute and URL scheme outside the allow list."""
    if value is None or not value.strip():
        return ""
    return bleach.clean(
        value,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )


def sanitize_plain_text(value: str | None) -> str:
    """Strip all markup and return the remaining text content.

    Entities are decoded so that ``&amp;`` reads as ``&``, and the decoded text
    is stripped again until it stops changing. Input that is still changing
    after ``MAX_PLAIN_TEXT_ROUNDS`` is returned in its escaped form.
    """
    if value is None or not value.strip():
        return ""
    text = value
    for _ in range(MAX_PLAIN_TEXT_ROUNDS):
        stripped = bleach.clean(text, tags=frozenset(), attributes={}, strip=True)
        decoded = html.unescape(stripped)
        if decoded == text:
            return decoded.strip()
        text = decoded
    return bleach.clean(text, tags=frozenset(), attributes={}, strip=True).strip()


def sanitize_markdown(value: str | None) -> str:
    """Render markdown to HTML and pass the result through `sanitize_html`."""
    if value is None or not value.strip():
        return ""
    rendered = markdown.markdown(value, extensions=MARKDOWN_EXTENSIONS)
    return sanitize_html(rendered)


def contains_dangerous_pattern(value: str | None) -> bool:
    """Case-insensitive check for script-injection markers."""
    if not value:
        return False
    return any(pattern.search(value) for pattern in DANGEROUS_PATTERNS)
