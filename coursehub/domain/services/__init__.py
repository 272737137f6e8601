"""Domain services."""

from coursehub.domain.services.audit_service import AuditService
from coursehub.domain.services.capability_service import CapabilityChecker, authorize_move
from coursehub.domain.services.discussion_move_service import DiscussionMoveService, MoveResult
from coursehub.domain.services.reconciliation import ReconciliationPlanner
from coursehub.domain.services.subscription_cache import SubscriptionCache
from coursehub.domain.services.subscription_resolver import SubscriptionStateResolver

__all__ = [
    "AuditService",
    "CapabilityChecker",
    "DiscussionMoveService",
    "MoveResult",
    "ReconciliationPlanner",
    "SubscriptionCache",
    "SubscriptionStateResolver",
    "authorize_move",
]
