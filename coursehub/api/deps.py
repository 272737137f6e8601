"""FastAPI dependencies for auth and discussion services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.core.auth import user_id_from_token
from coursehub.core.request_context import set_user_context
from coursehub.core.session_token import SessionTokenGuard
from coursehub.domain.services.discussion_move_service import DiscussionMoveService
from coursehub.persistence.database import get_db
from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.user_repository import UserRepository

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from JWT token.

    Args:
        credentials: HTTP bearer credentials
        db: Database session

    Returns:
        Current user

    Raises:
        HTTPException: If authentication fails
    """
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(None, user_id)

    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    set_user_context(user.id)
    return user


def get_session_token_guard() -> SessionTokenGuard:
    """One-time session token guard backed by the shared Redis client."""
    return SessionTokenGuard()


def get_discussion_move_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    token_guard: Annotated[SessionTokenGuard, Depends(get_session_token_guard)],
) -> DiscussionMoveService:
    """Discussion move service bound to the request's session."""
    return DiscussionMoveService(db, token_guard=token_guard)
