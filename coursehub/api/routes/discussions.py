"""Discussion API endpoints: session tokens, subscription status and moves."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.api.deps import (
    get_current_user,
    get_discussion_move_service,
    get_session_token_guard,
)
from coursehub.core.session_token import SessionTokenGuard
from coursehub.domain.exceptions import DiscussionMoveError
from coursehub.domain.services.capability_service import CapabilityChecker
from coursehub.domain.services.discussion_move_service import DiscussionMoveService
from coursehub.domain.services.subscription_cache import SubscriptionCache
from coursehub.domain.services.subscription_resolver import SubscriptionStateResolver
from coursehub.persistence.database import get_db
from coursehub.persistence.models.capability import Capability
from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.forum_repository import ForumRepository

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---

class SessionTokenResponse(BaseModel):
    """One-time token for a state-changing request."""

    session_token: str


class SubscriptionStatusResponse(BaseModel):
    """Caller's effective subscription to a discussion."""

    discussion_id: int
    forum_id: int
    subscribed: bool


class MoveDiscussionRequest(BaseModel):
    """Move request body."""

    target_forum_id: int = Field(..., ge=1)
    session_token: str = Field(..., min_length=1)


class MoveDiscussionResponse(BaseModel):
    """Outcome of a move."""

    discussion_id: int
    forum_id: int
    redirect_url: str
    warnings: list[str] = []
    subscription_changes: dict[int, str] = {}


async def _get_viewable_discussion(db: AsyncSession, discussion_id: int, user: User):
    """Load a discussion and its forum, 404 unless the caller can view it."""
    forum_repo = ForumRepository(db)
    discussion = await forum_repo.get_discussion_by_id(discussion_id)
    if discussion is None:
        raise HTTPException(status_code=404, detail="Discussion not found")

    forum = await forum_repo.get_forum_by_id(discussion.forum_id)
    checker = CapabilityChecker(db)
    if not await checker.has_capability(Capability.VIEW_DISCUSSION, forum, user.id):
        raise HTTPException(status_code=404, detail="Discussion not found")
    return discussion, forum


@router.get("/{discussion_id}/session-token", response_model=SessionTokenResponse)
async def get_session_token(
    discussion_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    token_guard: Annotated[SessionTokenGuard, Depends(get_session_token_guard)],
) -> SessionTokenResponse:
    """Issue a one-time token for acting on a discussion."""
    await _get_viewable_discussion(db, discussion_id, current_user)
    return SessionTokenResponse(session_token=token_guard.issue(current_user.id))


@router.get("/{discussion_id}/subscription", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    discussion_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SubscriptionStatusResponse:
    """Whether the caller receives posts of a discussion."""
    discussion, forum = await _get_viewable_discussion(db, discussion_id, current_user)

    cache = SubscriptionCache(db)
    await cache.fill(forum.id)
    resolver = SubscriptionStateResolver(cache)

    return SubscriptionStatusResponse(
        discussion_id=discussion.id,
        forum_id=forum.id,
        subscribed=resolver.is_subscribed(current_user.id, forum, discussion.id),
    )


@router.post("/{discussion_id}/move", response_model=MoveDiscussionResponse)
async def move_discussion(
    discussion_id: int,
    body: MoveDiscussionRequest,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DiscussionMoveService, Depends(get_discussion_move_service)],
) -> MoveDiscussionResponse:
    """Move a discussion to another forum of its course.

    Subscriptions are carried over so nobody's notifications change.
    """
    try:
        result = await service.move_discussion(
            discussion_id,
            body.target_forum_id,
            current_user,
            body.session_token,
            request=request,
        )
    except DiscussionMoveError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"code": e.code, "message": e.message},
        )

    return MoveDiscussionResponse(
        discussion_id=result.discussion_id,
        forum_id=result.forum_id,
        redirect_url=result.redirect_url,
        warnings=result.warnings,
        subscription_changes={
            user_id: action.kind.value
            for user_id, action in result.subscription_changes.items()
        },
    )
