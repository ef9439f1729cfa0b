"""Ownership policy for posts and comments."""

from __future__ import annotations

from dataclasses import dataclass, field

from inkwell.core.settings import settings


@dataclass(frozen=True)
class Actor:
    """Verified identity of the caller, built from token claims per request."""

    user_id: int
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def elevated(self) -> bool:
        """True for roles that bypass ownership checks (administrators, editors)."""
        return bool(self.roles & settings.elevated_role_set)


def can_mutate(actor_id: int, resource_owner_id: int | None, actor_elevated: bool) -> bool:
    """Return whether the actor may update or delete a resource.

    Elevated actors always may; everyone else only when they own the resource.
    Resources without an owner can only be handled by elevated actors.
    """
    if actor_elevated:
        return True
    return resource_owner_id is not None and actor_id == resource_owner_id
