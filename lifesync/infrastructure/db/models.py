"""
SQLAlchemy ORM models

Enum-typed columns store the enum's string value; validation happens in the
services (lifesync.application), not in the database.
Soft-deletable tables carry deleted_at; reads filter on deleted_at IS NULL.
"""
from decimal import Decimal
from datetime import date as date_type, datetime
from sqlalchemy import (
    String, Text, TIMESTAMP, Date, Boolean, Numeric, Float, Integer,
    CheckConstraint, UniqueConstraint, Index, func,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from lifesync.infrastructure.db.session import Base
from lifesync.utils.clock import new_id, utcnow


def _id_column() -> Mapped[str]:
    return mapped_column(String(36), primary_key=True, default=new_id)


def _created_at() -> Mapped[datetime]:
    return mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


def _updated_at() -> Mapped[datetime]:
    return mapped_column(
        TIMESTAMP(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


def _deleted_at() -> Mapped[datetime | None]:
    return mapped_column(TIMESTAMP(timezone=True), nullable=True, index=True)


# ============================================================================
# Users & collaboration
# ============================================================================


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = _id_column()
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    theme: Mapped[str] = mapped_column(String(16), nullable=False, default="light", server_default="light")  # dark/light
    language: Mapped[str] = mapped_column(String(16), nullable=False, default="de", server_default="de")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Europe/Berlin", server_default="Europe/Berlin")

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class TeamModel(Base):
    __tablename__ = "teams"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)  # -> users
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class TeamMemberModel(Base):
    """Join row, hard-deleted on removal"""
    __tablename__ = "team_members"

    id: Mapped[str] = _id_column()
    team_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="member", server_default="member")  # owner/admin/member
    joined_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (
        UniqueConstraint('team_id', 'user_id', name='uq_team_member'),
    )


class FriendModel(Base):
    """Stored once per pair: user_id is the requester"""
    __tablename__ = "friends"

    id: Mapped[str] = _id_column()
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    friend_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", server_default="pending")  # pending/accepted/blocked

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    __table_args__ = (
        UniqueConstraint('user_id', 'friend_id', name='uq_friend_pair'),
    )


# ============================================================================
# Projects & tasks
# ============================================================================


class ProjectModel(Base):
    __tablename__ = "projects"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    team_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", server_default="active")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#0ea5e9", server_default="#0ea5e9")
    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    progress: Mapped[Decimal] = mapped_column(Numeric(precision=5, scale=2), nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class TaskModel(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    project_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    parent_task_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)  # -> tasks

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="todo", server_default="todo")
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="medium", server_default="medium")
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    due_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    assignee_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    tags: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    completed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = _deleted_at()


# ============================================================================
# Habits
# ============================================================================


class HabitModel(Base):
    __tablename__ = "habits"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    frequency: Mapped[str] = mapped_column(String(16), nullable=False, default="daily", server_default="daily")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#10b981", server_default="#10b981")
    goal_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    goal_unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class HabitLogModel(Base):
    """One row per habit per day"""
    __tablename__ = "habit_logs"

    id: Mapped[str] = _id_column()
    habit_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    log_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False, default=1, server_default="1")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (
        UniqueConstraint('habit_id', 'log_date', name='uq_habit_log_day'),
    )


# ============================================================================
# Finances
# ============================================================================


class TransactionModel(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)  # income/expense/transfer
    category: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR", server_default="EUR")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    transaction_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tags: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()

    __table_args__ = (
        Index('ix_transactions_date', 'transaction_date'),
    )


# ============================================================================
# Calendar
# ============================================================================


class CalendarEventModel(Base):
    """source_type/source_id mark an entry as a copy of another entity (not kept in sync)"""
    __tablename__ = "events"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    team_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_type: Mapped[str] = mapped_column(String(16), nullable=False, default="event", server_default="event")
    source_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#0ea5e9", server_default="#0ea5e9")

    start_time: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    recurrence_rule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()

    __table_args__ = (
        Index('ix_events_source', 'source_type', 'source_id'),
    )


# ============================================================================
# Notes, files, messages, notifications
# ============================================================================


class NoteModel(Base):
    __tablename__ = "notes"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class FileModel(Base):
    """Metadata row; the bytes live in blob storage under storage_path"""
    __tablename__ = "files"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    note_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    related_type: Mapped[str | None] = mapped_column(String(16), nullable=True)  # note/task/message
    related_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = _created_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class MessageModel(Base):
    __tablename__ = "messages"

    id: Mapped[str] = _id_column()
    sender_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    recipient_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[datetime] = _created_at()
    deleted_at: Mapped[datetime | None] = _deleted_at()


class NotificationModel(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = _id_column()
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    related_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[datetime] = _created_at()


class SharedResourceModel(Base):
    """Grant on a calendar/project/task to exactly one user or one team"""
    __tablename__ = "shared_resources"

    id: Mapped[str] = _id_column()
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    shared_with_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    shared_with_team_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    resource_type: Mapped[str] = mapped_column(String(16), nullable=False)
    resource_id: Mapped[str] = mapped_column(String(36), nullable=False)
    permission: Mapped[str] = mapped_column(String(16), nullable=False, default="view", server_default="view")

    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (
        Index('ix_shared_resource_target', 'resource_type', 'resource_id'),
        CheckConstraint(
            '(shared_with_user_id IS NULL) <> (shared_with_team_id IS NULL)',
            name='ck_shared_resource_one_grantee',
        ),
    )
