"""JWT helpers for the already-issued bearer tokens this service consumes."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from inkwell.core.settings import settings
from inkwell.db.time import utcnow
from inkwell.services.authorization import Actor


class InvalidTokenError(ValueError):
    """Raised when a bearer token cannot be turned into an `Actor`."""


def create_access_token(
    user_id: int,
    roles: Iterable[str] = (),
    expires_delta: timedelta | None = None,
) -> str:
    """Return a signed JWT for ``user_id`` carrying ``roles``.

    Token issuance belongs to the identity provider; this exists for tooling
    and tests that need a token the service will accept.
    """
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: dict[str, Any] = {"sub": str(user_id), "roles": list(roles), "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_actor(token: str) -> Actor:
    """Validate ``token`` and return the identity it carries.

    Raises:
        InvalidTokenError: If the signature, expiry or claims are invalid.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    if subject is None:
        raise InvalidTokenError("Token has no subject")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise InvalidTokenError("Token subject is not a user id") from err

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return Actor(user_id=user_id, roles=frozenset(str(role).lower() for role in roles))
