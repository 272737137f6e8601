"""Pytest configuration and fixtures."""

from datetime import datetime

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursehub.core.session_token import SessionTokenGuard
from coursehub.infrastructure.attachment_storage import AttachmentStorage
from coursehub.persistence.database import Base
from coursehub.persistence.models import (
    ALL_GROUPS,
    CapabilityOverride,
    Course,
    CourseGroup,
    CourseGroupMembership,
    CourseRole,
    Discussion,
    DiscussionSubscription,
    Enrollment,
    Forum,
    ForumPost,
    ForumRead,
    ForumSubscription,
    ForumType,
    SubscriptionMode,
    User,
)

FIXED_NOW = datetime(2026, 3, 14, 9, 30, 0)


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


class FakeRedis:
    """In-memory stand-in for RedisClient."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.enabled = True
        self.available = True

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        self.store[key] = value
        return True

    async def set_nx(self, key: str, value: str, ttl: int) -> bool:
        if key in self.store:
            return False
        self.store[key] = value
        return True

    async def delete(self, key: str) -> int:
        return 1 if self.store.pop(key, None) is not None else 0


class RecordingAttachmentStorage(AttachmentStorage):
    """Attachment backend that records calls and returns a fixed outcome."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls: list[tuple[int, int, int]] = []

    async def relocate(self, discussion, from_forum_id, to_forum_id) -> bool:
        self.calls.append((discussion.id, from_forum_id, to_forum_id))
        return self.succeed


@pytest.fixture
def fake_redis():
    """In-memory Redis."""
    return FakeRedis()


@pytest.fixture
def token_guard(fake_redis):
    """Session token guard backed by the in-memory Redis."""
    return SessionTokenGuard(redis=fake_redis, secret="test-session-secret", ttl_seconds=600)


@pytest.fixture
def attachments():
    """Attachment backend that always succeeds."""
    return RecordingAttachmentStorage()


class CourseWorld:
    """A seeded course with forums, users and one discussion."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, instance):
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def user(self, name: str, role: CourseRole | None = CourseRole.STUDENT, **kwargs) -> User:
        user = await self.add(User(email=f"{name}@example.edu", full_name=name.title(), **kwargs))
        if role is not None:
            await self.enroll(user, self.course, role)
        return user

    async def enroll(self, user: User, course: Course, role: CourseRole, is_active: bool = True):
        return await self.add(
            Enrollment(course_id=course.id, user_id=user.id, role=role.value, is_active=is_active)
        )

    async def forum(self, name: str, course: Course | None = None, **kwargs) -> Forum:
        course = course or self.course
        return await self.add(Forum(course_id=course.id, name=name, **kwargs))

    async def subscribe_forum(self, user: User, forum: Forum, subscribed: bool = True):
        return await self.add(
            ForumSubscription(user_id=user.id, forum_id=forum.id, subscribed=subscribed)
        )

    async def subscribe_discussion(self, user: User, discussion: Discussion, subscribed: bool):
        return await self.add(
            DiscussionSubscription(
                user_id=user.id,
                forum_id=discussion.forum_id,
                discussion_id=discussion.id,
                subscribed=subscribed,
                preference_at=datetime(2026, 1, 5, 12, 0, 0),
            )
        )

    async def mark_read(self, user: User, discussion: Discussion, post: ForumPost):
        return await self.add(
            ForumRead(
                user_id=user.id,
                forum_id=discussion.forum_id,
                discussion_id=discussion.id,
                post_id=post.id,
            )
        )

    async def override(self, forum: Forum, role: CourseRole, capability, allowed: bool):
        return await self.add(
            CapabilityOverride(
                forum_id=forum.id, role=role.value, capability=capability.value, allowed=allowed
            )
        )

    async def group(self, name: str, *members: User) -> CourseGroup:
        group = await self.add(CourseGroup(course_id=self.course.id, name=name))
        for member in members:
            await self.add(CourseGroupMembership(user_id=member.id, group_id=group.id))
        return group

    async def create_discussion(
        self, forum: Forum, name: str, group_id: int = ALL_GROUPS, author: User | None = None
    ):
        discussion = await self.add(
            Discussion(
                course_id=forum.course_id,
                forum_id=forum.id,
                group_id=group_id,
                name=name,
                user_id=author.id if author else None,
            )
        )
        post = await self.add(
            ForumPost(
                discussion_id=discussion.id,
                user_id=author.id if author else None,
                subject=name,
                message="First post",
            )
        )
        discussion.first_post_id = post.id
        await self.session.flush()
        return discussion, post

    async def seed(self):
        self.course = await self.add(Course(shortname="BIO101", fullname="Biology 101"))
        self.other_course = await self.add(Course(shortname="CHEM201", fullname="Chemistry 201"))

        self.teacher = await self.user("teacher", CourseRole.EDITING_TEACHER)
        self.alice = await self.user("alice")
        self.bob = await self.user("bob")
        self.carol = await self.user("carol")
        self.dave = await self.user("dave")

        self.general = await self.forum("General discussion")
        self.qa = await self.forum("Questions and answers")
        self.single = await self.forum("Course introduction", type=ForumType.SINGLE.value)
        self.hidden = await self.forum("Staff room", is_visible=False)
        self.news = await self.forum(
            "Announcements",
            type=ForumType.NEWS.value,
            subscription_mode=SubscriptionMode.FORCED.value,
        )
        self.foreign = await self.forum("Lab forum", course=self.other_course)

        self.discussion, self.post = await self.discussion_in(self.general)
        await self.session.commit()
        return self

    async def discussion_in(self, forum: Forum):
        return await self.create_discussion(forum, "Photosynthesis question", author=self.alice)


@pytest.fixture
async def world(db_session) -> CourseWorld:
    """Seeded course: a teacher, four students and a set of forums."""
    return await CourseWorld(db_session).seed()


@pytest.fixture
async def client(db_session):
    """Create a test API client bound to the test database."""
    from coursehub.main import app
    from coursehub.persistence.database import get_db

    async def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def fixed_clock():
    """Clock returning a constant timestamp."""
    return lambda: FIXED_NOW

