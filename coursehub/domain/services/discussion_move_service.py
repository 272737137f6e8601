"""Move a discussion to another forum of the same course.

The move keeps every user's notifications for the discussion as they were:
per-discussion opt-ins and opt-outs that still matter in the target forum
are rewritten, redundant ones are dropped.

Order of operations:

1. checks (token, target, capabilities, forum types, visibility); no writes
2. attachments are moved (failure only produces a warning)
3. subscribers are enumerated and every user's outcome is planned
4. discussion, read-tracking rows, subscription rows and the audit entry
   are written and committed in one transaction
5. both forums' feeds are invalidated

Attachments are moved outside the database transaction and are not moved
back if a later step fails.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.core.session_token import SessionTokenGuard
from coursehub.domain.exceptions import (
    DiscussionMoveError,
    DiscussionNotFound,
    InvalidSessionToken,
)
from coursehub.domain.services.audit_service import AuditService, record_snapshot
from coursehub.domain.services.capability_service import CapabilityChecker, authorize_move
from coursehub.domain.services.reconciliation import (
    ReconciliationPlanner,
    SubscriptionAction,
    SubscriptionActionKind,
    SubscriptionSignals,
)
from coursehub.domain.services.subscription_cache import SubscriptionCache
from coursehub.domain.services.subscription_resolver import SubscriptionStateResolver
from coursehub.infrastructure.attachment_storage import AttachmentStorage, get_attachment_storage
from coursehub.infrastructure.feed_cache import FeedCache
from coursehub.persistence.models.capability import Capability
from coursehub.persistence.models.forum import ALL_GROUPS, Discussion, Forum
from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.forum_repository import ForumRepository
from coursehub.persistence.repositories.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

ATTACHMENT_WARNING = (
    "Errors occurred while moving attachments - check the attachment storage permissions"
)


@dataclass
class MoveResult:
    """Where the discussion lives now."""

    discussion_id: int
    course_id: int
    forum_id: int
    from_forum_id: int
    attachment_warning: bool = False
    subscription_changes: dict[int, SubscriptionAction] = field(default_factory=dict)

    @property
    def redirect_url(self) -> str:
        return f"/discussions/{self.discussion_id}?moved=1"

    @property
    def warnings(self) -> list[str]:
        return [ATTACHMENT_WARNING] if self.attachment_warning else []


class DiscussionMoveService:
    """Service relocating discussions between forums."""

    def __init__(
        self,
        session: AsyncSession,
        attachments: AttachmentStorage | None = None,
        feeds: FeedCache | None = None,
        token_guard: SessionTokenGuard | None = None,
        capabilities: CapabilityChecker | None = None,
        planner: ReconciliationPlanner | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize discussion move service.

        Args:
            session: Database session; the service commits it
            attachments: Attachment backend, defaults to the configured one
            feeds: Feed cache to invalidate
            token_guard: One-time session token guard
            capabilities: Capability checker
            planner: Subscription reconciliation planner
            clock: Source of the shared subscription timestamp
        """
        self.session = session
        self.forum_repo = ForumRepository(session)
        self.subscription_repo = SubscriptionRepository(session)
        self.audit = AuditService(session)
        self.attachments = attachments or get_attachment_storage()
        self.feeds = feeds or FeedCache()
        self.token_guard = token_guard or SessionTokenGuard()
        self.capabilities = capabilities or CapabilityChecker(session)
        self.planner = planner or ReconciliationPlanner()
        self._now = clock or datetime.utcnow

    async def move_discussion(
        self,
        discussion_id: int,
        target_forum_id: int,
        caller: User,
        session_token: str,
        request: Request | None = None,
    ) -> MoveResult:
        """Move a discussion into another forum.

        Raises:
            DiscussionMoveError: If the move is rejected. Always raised
                before anything is written.
        """
        log_extra = {
            "discussion_id": discussion_id,
            "target_forum_id": target_forum_id,
            "user_id": caller.id,
        }
        try:
            discussion, source, target = await self._check_move(
                discussion_id, target_forum_id, caller, session_token
            )
        except DiscussionMoveError as e:
            logger.warning(f"Discussion move rejected: {e.code}", extra=log_extra)
            raise

        logger.info(
            f"Moving discussion {discussion.id} from forum {source.id} to forum {target.id}",
            extra=log_extra,
        )

        discussion_snapshot = record_snapshot(discussion)
        source_snapshot = record_snapshot(source)
        target_snapshot = record_snapshot(target)

        attachments_moved = await self.attachments.relocate(discussion, source.id, target.id)
        if not attachments_moved:
            logger.warning(
                f"Attachments of discussion {discussion.id} were not fully moved",
                extra=log_extra,
            )

        as_of = self._now()
        changes = await self.plan_subscription_changes(discussion, source, target, as_of)

        try:
            await self.forum_repo.set_discussion_forum(discussion.id, target.id)
            read_records = await self.forum_repo.set_read_tracking_forum(discussion.id, target.id)
            applied = await self._replace_subscriptions(discussion.id, target, changes, as_of)
            await self.audit.log_discussion_moved(
                caller,
                discussion_snapshot,
                source_snapshot,
                target_snapshot,
                details={
                    "read_records_moved": read_records,
                    "forced_subscriptions": _count(applied, SubscriptionActionKind.FORCE_SUBSCRIBE),
                    "forced_unsubscriptions": _count(
                        applied, SubscriptionActionKind.FORCE_UNSUBSCRIBE
                    ),
                    "dropped_without_view": len(changes) - len(applied),
                    "attachment_warning": not attachments_moved,
                },
                request=request,
            )
            await self.session.commit()
        except Exception:
            logger.exception(f"Moving discussion {discussion_id} failed", extra=log_extra)
            await self.session.rollback()
            raise

        for forum in (source, target):
            try:
                await self.feeds.invalidate(forum)
            except Exception as e:
                logger.error(f"Feed invalidation failed for forum {forum.id}: {e}")

        logger.info(
            f"Moved discussion {discussion.id} to forum {target.id}: "
            f"{len(applied)} subscription rows written",
            extra=log_extra,
        )
        return MoveResult(
            discussion_id=discussion.id,
            course_id=discussion.course_id,
            forum_id=target.id,
            from_forum_id=source.id,
            attachment_warning=not attachments_moved,
            subscription_changes=applied,
        )

    async def _check_move(
        self,
        discussion_id: int,
        target_forum_id: int,
        caller: User,
        session_token: str,
    ) -> tuple[Discussion, Forum, Forum]:
        """Run every pre-write check; the session token is claimed last."""
        if not self.token_guard.verify(caller.id, session_token):
            raise InvalidSessionToken()

        discussion = await self.forum_repo.get_discussion_by_id(discussion_id)
        if discussion is None:
            raise DiscussionNotFound()
        source = await self.forum_repo.get_forum_by_id(discussion.forum_id)

        target = await self.forum_repo.get_forum_by_id(target_forum_id)
        grants = None
        if target is not None:
            grants = await self.capabilities.move_grants(source, target, caller.id)
        authorize_move(source, target, grants)

        if not await self.token_guard.consume(caller.id, session_token, session=self.session):
            raise InvalidSessionToken()
        return discussion, source, target

    async def plan_subscription_changes(
        self,
        discussion: Discussion,
        source: Forum,
        target: Forum,
        as_of: datetime,
    ) -> dict[int, SubscriptionAction]:
        """Plan the per-discussion row of every potential subscriber.

        Returns:
            user_id -> action for users that need a row after the move
        """
        group_id = 0 if discussion.group_id == ALL_GROUPS else discussion.group_id
        subscribers = await self.subscription_repo.fetch_subscribed_users(
            source, group_id, include_discussion_subscriptions=True
        )

        cache = SubscriptionCache(self.session)
        await cache.fill(target.id)
        await cache.fill(source.id)
        resolver = SubscriptionStateResolver(cache)

        signals = {
            user.id: SubscriptionSignals(
                forum_subscribed=resolver.is_subscribed(user.id, source),
                discussion_subscribed=resolver.is_subscribed(user.id, source, discussion.id),
                target_subscribed=resolver.is_subscribed(user.id, target),
            )
            for user in subscribers
        }
        changes = self.planner.plan_all(signals, as_of)
        logger.debug(
            f"Planned {len(changes)} subscription changes for {len(signals)} "
            f"potential subscribers of discussion {discussion.id}"
        )
        return changes

    async def _replace_subscriptions(
        self,
        discussion_id: int,
        target: Forum,
        changes: dict[int, SubscriptionAction],
        as_of: datetime,
    ) -> dict[int, SubscriptionAction]:
        """Replace the discussion's per-discussion rows with the planned ones.

        Forced subscriptions are only written for users who can view
        discussions in the target forum.

        Returns:
            The actions that were written
        """
        await self.subscription_repo.delete_discussion_subscriptions(discussion_id)

        applied: dict[int, SubscriptionAction] = {}
        for user_id, action in changes.items():
            if action.kind == SubscriptionActionKind.FORCE_SUBSCRIBE:
                can_view = await self.capabilities.has_capability(
                    Capability.VIEW_DISCUSSION, target, user_id
                )
                if not can_view:
                    logger.debug(
                        f"Not subscribing user {user_id} to discussion {discussion_id}: "
                        f"cannot view forum {target.id}"
                    )
                    continue
                subscribed = True
            else:
                subscribed = False

            await self.subscription_repo.create_discussion_subscription(
                user_id=user_id,
                forum_id=target.id,
                discussion_id=discussion_id,
                subscribed=subscribed,
                preference_at=action.as_of or as_of,
            )
            applied[user_id] = action
        return applied


def _count(actions: dict[int, SubscriptionAction], kind: SubscriptionActionKind) -> int:
    return sum(1 for action in actions.values() if action.kind == kind)
