"""
Entities of the session-only (in-memory) experience.

Plain dataclasses; enum-typed fields are converted in __post_init__ so an
invalid status/mood/priority is rejected when the entity is built.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from lifesync.domain.enums import (
    CalendarType,
    Mood,
    PresenceStatus,
    Priority,
    RequestStatus,
    parse_enum,
)


@dataclass
class LocalTask:
    id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    repeat: bool = False

    def __post_init__(self):
        self.priority = parse_enum(Priority, self.priority, "priority")


@dataclass
class LocalEvent:
    id: str
    title: str
    date: date
    start_time: str = "12:00"
    end_time: str = "13:00"
    calendar_type: CalendarType = CalendarType.PRIVATE
    participants: List[str] = field(default_factory=list)
    color: str = "#0ea5e9"

    def __post_init__(self):
        self.calendar_type = parse_enum(CalendarType, self.calendar_type, "calendar_type")


@dataclass
class UserSnapshot:
    """Denormalized copy of a user, as carried by friend requests"""
    id: str
    name: str
    avatar: str
    tag: str


@dataclass
class LocalFriend:
    id: str
    name: str
    avatar: str
    tag: str
    status: PresenceStatus = PresenceStatus.OFFLINE

    def __post_init__(self):
        self.status = parse_enum(PresenceStatus, self.status, "status")


@dataclass
class FriendRequest:
    id: str
    from_user: UserSnapshot
    to_user_id: str
    status: RequestStatus = RequestStatus.PENDING

    def __post_init__(self):
        self.status = parse_enum(RequestStatus, self.status, "status")


@dataclass
class Channel:
    id: str
    name: str


@dataclass
class Group:
    id: str
    name: str
    icon: str
    members: List[str] = field(default_factory=list)
    channels: List[Channel] = field(default_factory=list)


@dataclass
class ChatMessage:
    """conversation_id is a friend id (direct chat) or a channel id"""
    id: str
    sender_id: str
    conversation_id: str
    content: str
    timestamp: datetime
    read: bool = False


@dataclass
class Memory:
    id: str
    title: str
    content: str
    date: date
    mood: Optional[Mood] = None
    tags: List[str] = field(default_factory=list)
    photos: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.mood is not None:
            self.mood = parse_enum(Mood, self.mood, "mood")


@dataclass
class FileEntry:
    id: str
    name: str
    size: int
    mime_type: str
    upload_date: datetime
    uploader: str
    category: str
    description: Optional[str] = None
    url: str = "#"
