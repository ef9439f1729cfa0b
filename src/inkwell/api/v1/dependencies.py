"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from inkwell.core.security import InvalidTokenError, decode_actor
from inkwell.db.session import get_db
from inkwell.services.authorization import Actor
from inkwell.services.comment_service import CommentService
from inkwell.services.errors import InkwellError, InvalidInputError, MutationResult, NotFoundError
from inkwell.services.hub import RealtimeHub, get_hub
from inkwell.services.notification_service import NotificationService
from inkwell.services.post_service import PostService
from inkwell.services.reaction_service import ReactionService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> Actor:
    """Resolve the calling user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials

    Returns:
        Actor carrying the user id and roles from the token

    Raises:
        HTTPException: If the token is invalid or expired
    """
    try:
        return decode_actor(credentials.credentials)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


CurrentActorDep = Annotated[Actor, Depends(get_current_actor)]


def require_elevated(actor: CurrentActorDep) -> Actor:
    """Allow only actors holding an elevated role."""
    if not actor.elevated:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Elevated role required",
        )
    return actor


ElevatedActorDep = Annotated[Actor, Depends(require_elevated)]
HubDep = Annotated[RealtimeHub, Depends(get_hub)]


def get_post_service(db: SessionDep) -> PostService:
    return PostService(db)


def get_comment_service(db: SessionDep) -> CommentService:
    return CommentService(db)


def get_reaction_service(db: SessionDep) -> ReactionService:
    return ReactionService(db)


def get_notification_service(db: SessionDep, hub: HubDep) -> NotificationService:
    return NotificationService(db, hub)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def http_error(err: InkwellError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=err.message)
    if isinstance(err, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err.message)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=err.message)


def ensure_ok(result: MutationResult, resource: str) -> None:
    """Raise 404 or 403 unless ``result`` is ``MutationResult.OK``."""
    if result is MutationResult.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")
    if result is MutationResult.FORBIDDEN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not allowed to modify this {resource.lower()}",
        )
