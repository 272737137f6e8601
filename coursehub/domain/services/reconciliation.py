"""Per-discussion subscription reconciliation for moved discussions.

When a discussion changes forum, a user's per-discussion override only has
to survive where dropping it would change what the user receives:

| forum | discussion | target | action            |
|-------|------------|--------|-------------------|
| yes   | no         | yes    | force unsubscribe |
| no    | yes        | no     | force subscribe   |
| any other combination       | no change         |

Every other combination is already consistent after the move.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Mapping


class SubscriptionActionKind(str, Enum):
    """What to write for one user after a move."""

    NO_CHANGE = "no_change"
    FORCE_UNSUBSCRIBE = "force_unsubscribe"
    FORCE_SUBSCRIBE = "force_subscribe"


@dataclass(frozen=True)
class SubscriptionSignals:
    """A user's status before the move, at three levels."""

    forum_subscribed: bool  # source forum, ignoring the discussion
    discussion_subscribed: bool  # the discussion in the source forum
    target_subscribed: bool  # target forum, as if the discussion lived there


@dataclass(frozen=True)
class SubscriptionAction:
    """Planned per-discussion outcome for one user."""

    kind: SubscriptionActionKind
    as_of: datetime | None = None

    @property
    def is_change(self) -> bool:
        return self.kind != SubscriptionActionKind.NO_CHANGE


NO_CHANGE = SubscriptionAction(SubscriptionActionKind.NO_CHANGE)
FORCE_UNSUBSCRIBE = SubscriptionAction(SubscriptionActionKind.FORCE_UNSUBSCRIBE)


class ReconciliationPlanner:
    """Decide each user's per-discussion row after a move.

    Each user's plan depends only on that user's signals.
    """

    def plan(self, signals: SubscriptionSignals, as_of: datetime) -> SubscriptionAction:
        """Plan one user."""
        forum, discussion, target = (
            signals.forum_subscribed,
            signals.discussion_subscribed,
            signals.target_subscribed,
        )
        if forum and not discussion and target:
            # Opted out of this discussion; the target forum would resubscribe them.
            return FORCE_UNSUBSCRIBE
        if not forum and discussion and not target:
            # Opted into this discussion; the target forum would drop them.
            return SubscriptionAction(SubscriptionActionKind.FORCE_SUBSCRIBE, as_of=as_of)
        return NO_CHANGE

    def plan_all(
        self, signals_by_user: Mapping[int, SubscriptionSignals], as_of: datetime
    ) -> dict[int, SubscriptionAction]:
        """Plan every user, keeping only users that need a row.

        Args:
            signals_by_user: user_id -> signals
            as_of: Preference time shared by every forced subscription

        Returns:
            user_id -> action, without NO_CHANGE entries
        """
        changes: dict[int, SubscriptionAction] = {}
        for user_id, signals in signals_by_user.items():
            action = self.plan(signals, as_of)
            if action.is_change:
                changes[user_id] = action
        return changes
