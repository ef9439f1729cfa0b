# tests/support.py
"""Shared identities and hub doubles for the test suite."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

AUTHOR_ID = 1
OTHER_USER_ID = 2
EDITOR_ID = 99


class RecordingHub:
    """Hub double that remembers every push."""

    def __init__(self) -> None:
        self.pushes: list[tuple[int, str, dict[str, Any]]] = []

    async def push_to_user(self, user_id: int, event_name: str, payload: Mapping[str, Any]) -> None:
        self.pushes.append((user_id, event_name, dict(payload)))

    def pushes_for(self, user_id: int) -> list[dict[str, Any]]:
        return [payload for recipient, _, payload in self.pushes if recipient == user_id]


class FailingHub:
    """Hub double whose transport is always down."""

    def __init__(self) -> None:
        self.attempts = 0

    async def push_to_user(self, user_id: int, event_name: str, payload: Mapping[str, Any]) -> None:
        self.attempts += 1
        raise ConnectionError("hub unavailable")
