"""
Closed enumerations for every status/type/role field.

Raw strings coming from callers go through parse_enum(), which rejects
unknown values with a ValidationError instead of storing them.
"""
from enum import Enum
from typing import TypeVar

from lifesync.domain.errors import ValidationError

E = TypeVar("E", bound=Enum)


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class TeamRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class FriendStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class SourceType(str, Enum):
    """Provenance of a calendar entry"""
    TASK = "task"
    HABIT = "habit"
    TRANSACTION = "transaction"
    EVENT = "event"
    MEMORY = "memory"


class RelatedType(str, Enum):
    NOTE = "note"
    TASK = "task"
    MESSAGE = "message"


class NotificationType(str, Enum):
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    FRIEND_REQUEST = "friend_request"
    MESSAGE = "message"
    PROJECT_UPDATE = "project_update"
    TEAM_INVITE = "team_invite"


class ResourceType(str, Enum):
    CALENDAR = "calendar"
    PROJECT = "project"
    TASK = "task"


class Permission(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"


# ── Local (session-only) model ──

class CalendarType(str, Enum):
    PRIVATE = "private"
    FRIENDS = "friends"


class PresenceStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    AWAY = "away"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RequestAction(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    NEUTRAL = "neutral"
    EXCITED = "excited"
    STRESSED = "stressed"


def parse_enum(enum_cls: type[E], value, field: str) -> E:
    """Convert a raw value to enum_cls, raising ValidationError for unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field}: {value!r} (allowed: {allowed})") from None
