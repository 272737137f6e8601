"""Tests for the subscription reconciliation planner."""

from datetime import datetime
from itertools import product

import pytest

from coursehub.domain.services.reconciliation import (
    NO_CHANGE,
    ReconciliationPlanner,
    SubscriptionActionKind,
    SubscriptionSignals,
)

AS_OF = datetime(2026, 3, 14, 9, 30, 0)

EXPECTED = {
    (True, False, True): SubscriptionActionKind.FORCE_UNSUBSCRIBE,
    (False, True, False): SubscriptionActionKind.FORCE_SUBSCRIBE,
}


@pytest.fixture
def planner():
    return ReconciliationPlanner()


class TestPlan:
    """Tests for single-user planning."""

    @pytest.mark.parametrize("forum,discussion,target", list(product([True, False], repeat=3)))
    def test_decision_table(self, planner, forum, discussion, target):
        """Every input combination maps to exactly one action."""
        action = planner.plan(SubscriptionSignals(forum, discussion, target), AS_OF)

        expected = EXPECTED.get((forum, discussion, target), SubscriptionActionKind.NO_CHANGE)
        assert action.kind == expected

    def test_force_subscribe_carries_timestamp(self, planner):
        """Forced subscriptions are stamped with the shared timestamp."""
        action = planner.plan(SubscriptionSignals(False, True, False), AS_OF)
        assert action.as_of == AS_OF
        assert action.is_change is True

    def test_force_unsubscribe_has_no_timestamp(self, planner):
        action = planner.plan(SubscriptionSignals(True, False, True), AS_OF)
        assert action.as_of is None

    @pytest.mark.parametrize(
        "signals",
        [
            SubscriptionSignals(True, True, True),
            SubscriptionSignals(True, True, False),
            SubscriptionSignals(False, False, True),
            SubscriptionSignals(False, False, False),
        ],
    )
    def test_no_change_is_stable(self, planner, signals):
        """Re-planning a NoChange user gives NoChange again."""
        first = planner.plan(signals, AS_OF)
        second = planner.plan(signals, datetime(2027, 1, 1))
        assert first == NO_CHANGE
        assert second == NO_CHANGE
        assert first.is_change is False


class TestPlanAll:
    """Tests for planning many users at once."""

    def test_drops_no_change_users(self, planner):
        changes = planner.plan_all(
            {
                1: SubscriptionSignals(True, False, True),
                2: SubscriptionSignals(True, True, True),
                3: SubscriptionSignals(False, True, False),
            },
            AS_OF,
        )

        assert set(changes) == {1, 3}
        assert changes[1].kind == SubscriptionActionKind.FORCE_UNSUBSCRIBE
        assert changes[3].kind == SubscriptionActionKind.FORCE_SUBSCRIBE

    def test_users_are_planned_independently(self, planner):
        """A user's outcome does not depend on who else is planned."""
        signals = SubscriptionSignals(False, True, False)
        alone = planner.plan_all({7: signals}, AS_OF)
        crowded = planner.plan_all(
            {5: SubscriptionSignals(True, False, True), 7: signals, 9: signals}, AS_OF
        )
        assert alone[7] == crowded[7]

    def test_shared_timestamp(self, planner):
        changes = planner.plan_all(
            {1: SubscriptionSignals(False, True, False), 2: SubscriptionSignals(False, True, False)},
            AS_OF,
        )
        assert {action.as_of for action in changes.values()} == {AS_OF}

    def test_empty(self, planner):
        assert planner.plan_all({}, AS_OF) == {}
