"""Course, enrollment and course group models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from coursehub.persistence.database import Base


class CourseRole(str, Enum):
    """Role a user holds inside a course."""

    GUEST = "guest"
    STUDENT = "student"
    TEACHER = "teacher"
    EDITING_TEACHER = "editingteacher"
    MANAGER = "manager"


class Course(Base):
    """Course owning forums and discussions."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    shortname = Column(String(100), unique=True, nullable=False)
    fullname = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    enrollments = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan"
    )
    groups = relationship("CourseGroup", back_populates="course", cascade="all, delete-orphan")


class Enrollment(Base):
    """A user's enrollment in a course, with the role it grants."""

    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("course_id", "user_id", name="uq_course_enrollment"),)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String(50), default=CourseRole.STUDENT.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    enrolled_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    course = relationship("Course", back_populates="enrollments")
    user = relationship("User")


class CourseGroup(Base):
    """Group of users inside a course.

    Discussions may be scoped to a single group; subscriber lookups for such
    discussions only consider that group's members.
    """

    __tablename__ = "course_groups"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    course = relationship("Course", back_populates="groups")
    memberships = relationship(
        "CourseGroupMembership", back_populates="group", cascade="all, delete-orphan"
    )


class CourseGroupMembership(Base):
    """Junction table for course group membership."""

    __tablename__ = "course_group_memberships"
    __table_args__ = (UniqueConstraint("user_id", "group_id", name="uq_user_course_group"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_id = Column(
        Integer, ForeignKey("course_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User")
    group = relationship("CourseGroup", back_populates="memberships")
