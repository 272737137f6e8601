"""Tests for potential subscriber enumeration."""

import pytest

from coursehub.persistence.models.course import CourseRole
from coursehub.persistence.repositories.subscription_repository import SubscriptionRepository


def _emails(users):
    return [user.email for user in users]


class TestFetchSubscribedUsers:
    """Tests for SubscriptionRepository.fetch_subscribed_users."""

    @pytest.mark.asyncio
    async def test_forum_opt_ins_only(self, world):
        await world.subscribe_forum(world.alice, world.general)
        await world.subscribe_forum(world.carol, world.general, subscribed=False)
        await world.subscribe_discussion(world.bob, world.discussion, subscribed=True)
        repo = SubscriptionRepository(world.session)

        users = await repo.fetch_subscribed_users(world.general)

        assert _emails(users) == ["alice@example.edu"]

    @pytest.mark.asyncio
    async def test_includes_discussion_opt_ins(self, world):
        await world.subscribe_forum(world.alice, world.general)
        await world.subscribe_discussion(world.bob, world.discussion, subscribed=True)
        await world.subscribe_discussion(world.carol, world.discussion, subscribed=False)
        repo = SubscriptionRepository(world.session)

        users = await repo.fetch_subscribed_users(
            world.general, include_discussion_subscriptions=True
        )

        assert _emails(users) == ["alice@example.edu", "bob@example.edu"]

    @pytest.mark.asyncio
    async def test_forced_forum_yields_every_enrollee(self, world):
        await world.subscribe_forum(world.carol, world.news, subscribed=False)
        repo = SubscriptionRepository(world.session)

        users = await repo.fetch_subscribed_users(world.news)

        assert _emails(users) == [
            "alice@example.edu",
            "bob@example.edu",
            "carol@example.edu",
            "dave@example.edu",
            "teacher@example.edu",
        ]

    @pytest.mark.asyncio
    async def test_group_scope(self, world):
        group = await world.group("Lab A", world.alice, world.carol)
        for user in (world.alice, world.bob, world.carol):
            await world.subscribe_forum(user, world.general)
        repo = SubscriptionRepository(world.session)

        scoped = await repo.fetch_subscribed_users(world.general, group_id=group.id)
        unscoped = await repo.fetch_subscribed_users(world.general, group_id=0)

        assert _emails(scoped) == ["alice@example.edu", "carol@example.edu"]
        assert len(unscoped) == 3

    @pytest.mark.asyncio
    async def test_only_active_enrollees(self, world):
        lapsed = await world.user("lapsed", role=None)
        await world.enroll(lapsed, world.course, CourseRole.STUDENT, is_active=False)
        outsider = await world.user("outsider", role=None)
        await world.enroll(outsider, world.other_course, CourseRole.STUDENT)
        await world.subscribe_forum(lapsed, world.general)
        await world.subscribe_forum(outsider, world.general)
        await world.subscribe_forum(world.dave, world.general)
        repo = SubscriptionRepository(world.session)

        users = await repo.fetch_subscribed_users(world.general)

        assert _emails(users) == ["dave@example.edu"]

    @pytest.mark.asyncio
    async def test_inactive_accounts_excluded(self, world):
        world.bob.is_active = False
        await world.session.flush()
        await world.subscribe_forum(world.bob, world.general)
        repo = SubscriptionRepository(world.session)

        assert await repo.fetch_subscribed_users(world.general) == []
