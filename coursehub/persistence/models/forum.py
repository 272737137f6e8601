"""Forum models: forums, discussions, posts, subscriptions and read tracking.

Subscription rows are explicit preferences. A missing row means the user
inherits from the next level up (discussion -> forum -> forum default).
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from coursehub.persistence.database import Base

# Discussion.group_id value meaning "visible to all groups"
ALL_GROUPS = -1


class ForumType(str, Enum):
    """Forum layout type."""

    GENERAL = "general"
    SINGLE = "single"  # exactly one discussion, cannot gain or lose one
    NEWS = "news"


class SubscriptionMode(str, Enum):
    """Forum default subscription mode."""

    OPTIONAL = "optional"
    FORCED = "forced"
    AUTOMATIC = "automatic"
    DISABLED = "disabled"


class Forum(Base):
    """Forum inside a course."""

    __tablename__ = "forums"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    type = Column(String(20), default=ForumType.GENERAL.value, nullable=False)
    subscription_mode = Column(
        String(20), default=SubscriptionMode.OPTIONAL.value, nullable=False
    )
    is_visible = Column(Boolean, default=True, nullable=False)
    rss_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    course = relationship("Course")
    discussions = relationship("Discussion", back_populates="forum")

    @property
    def forum_type(self) -> ForumType:
        return ForumType(self.type)

    @property
    def mode(self) -> SubscriptionMode:
        return SubscriptionMode(self.subscription_mode)

    def __repr__(self) -> str:
        return f"<Forum(id={self.id}, course_id={self.course_id}, type={self.type})>"


class Discussion(Base):
    """Discussion thread living in exactly one forum."""

    __tablename__ = "forum_discussions"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    forum_id = Column(
        Integer, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_id = Column(Integer, default=ALL_GROUPS, nullable=False)
    name = Column(String(255), nullable=False)
    first_post_id = Column(Integer, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    forum = relationship("Forum", back_populates="discussions")
    posts = relationship("ForumPost", back_populates="discussion", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Discussion(id={self.id}, forum_id={self.forum_id}, group_id={self.group_id})>"


class ForumPost(Base):
    """Post in a discussion. Attachments are stored outside the database."""

    __tablename__ = "forum_posts"

    id = Column(Integer, primary_key=True, index=True)
    discussion_id = Column(
        Integer, ForeignKey("forum_discussions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id = Column(Integer, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False, default="")
    has_attachments = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationships
    discussion = relationship("Discussion", back_populates="posts")


class ForumSubscription(Base):
    """Forum-level subscription preference for one user."""

    __tablename__ = "forum_subscriptions"
    __table_args__ = (UniqueConstraint("user_id", "forum_id", name="uq_forum_subscription"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    forum_id = Column(
        Integer, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subscribed = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class DiscussionSubscription(Base):
    """Per-discussion override of a user's forum-level subscription.

    ``subscribed`` False is an explicit opt-out of the discussion.
    ``preference_at`` is when the preference was set.
    """

    __tablename__ = "forum_discussion_subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "discussion_id", name="uq_discussion_subscription"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    forum_id = Column(
        Integer, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    discussion_id = Column(
        Integer, ForeignKey("forum_discussions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subscribed = Column(Boolean, nullable=False)
    preference_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ForumRead(Base):
    """Read-tracking row. ``forum_id`` always equals the discussion's forum."""

    __tablename__ = "forum_read"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    forum_id = Column(
        Integer, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    discussion_id = Column(
        Integer, ForeignKey("forum_discussions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    post_id = Column(
        Integer, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False
    )
    first_read = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_read = Column(DateTime, default=datetime.utcnow, nullable=False)
