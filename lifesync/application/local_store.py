"""
Session-only data store.

Holds every collection of the in-memory experience in plain lists and
notifies subscribers after each change. Nothing is persisted: a new store
starts empty (see local_seed.seed_demo_data for the demo content).

Mutators never raise for unknown ids; they do nothing and return None.
Building an entity with an invalid enum value raises ValidationError.
"""
import dataclasses
import logging
import mimetypes
import random
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from lifesync.domain.enums import Mood, PresenceStatus, RequestAction, parse_enum
from lifesync.domain.errors import ValidationError
from lifesync.domain.local_models import (
    ChatMessage,
    FileEntry,
    FriendRequest,
    Group,
    LocalEvent,
    LocalFriend,
    LocalTask,
    Memory,
    UserSnapshot,
)
from lifesync.utils.clock import new_id, utcnow

logger = logging.getLogger(__name__)

EVENT_COLORS = ("#0ea5e9", "#10b981", "#f59e0b", "#8b5cf6", "#ef4444")
PLACEHOLDER_MIME_TYPES = ("image/jpeg", "application/pdf", "application/zip")
MAX_PLACEHOLDER_SIZE = 5 * 1024 * 1024

Listener = Callable[[str], None]


class LocalDataStore:
    """
    Explicit store handle; the composition root creates one per session.

    Args:
        id_factory: returns fresh ids (uuid4 strings by default)
        clock: returns the current aware datetime
        rng: random source for event colors and placeholder file metadata
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utcnow,
        rng: Optional[random.Random] = None,
    ):
        self.id_factory = id_factory
        self.clock = clock
        self.rng = rng or random.Random()

        self.tasks: List[LocalTask] = []
        self.events: List[LocalEvent] = []
        self.memories: List[Memory] = []
        self.files: List[FileEntry] = []
        self.friends: List[LocalFriend] = []
        self.friend_requests: List[FriendRequest] = []
        self.groups: List[Group] = []
        self.messages: List[ChatMessage] = []
        # tag -> user, used to resolve add_friend
        self.directory: Dict[str, UserSnapshot] = {}

        self._listeners: List[Listener] = []

    # ── Subscriptions ──

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(collection_name); returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, collection: str) -> None:
        for listener in list(self._listeners):
            listener(collection)

    # ── Generic helpers ──

    def _today(self) -> date:
        return self.clock().date()

    @staticmethod
    def _find(items: List[Any], item_id: str) -> Optional[int]:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        return None

    def _update(self, collection: str, item_id: str, changes: Dict[str, Any]):
        items = getattr(self, collection)
        index = self._find(items, item_id)
        if index is None:
            return None
        if "id" in changes:
            raise ValidationError("id cannot be changed")
        known = {f.name for f in dataclasses.fields(items[index])}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(f"Unknown fields for {collection}: {', '.join(unknown)}")
        # replace() runs __post_init__ again, so enum fields are re-validated
        items[index] = dataclasses.replace(items[index], **changes)
        self.notify(collection)
        return items[index]

    def _delete(self, collection: str, item_id: str) -> None:
        items = getattr(self, collection)
        index = self._find(items, item_id)
        if index is None:
            return
        del items[index]
        self.notify(collection)

    # ── Tasks ──

    def add_task(self, title: str, **fields) -> LocalTask:
        task = LocalTask(id=self.id_factory(), title=title, **fields)
        self.tasks.insert(0, task)
        self.notify("tasks")
        return task

    def toggle_task(self, task_id: str) -> Optional[LocalTask]:
        """
        Flip completion of a task.

        Completing an open repeating task appends its next instance, due one
        day after the current due date (or after today when unset). Reopening
        a repeating task leaves the already spawned instance alone.
        """
        index = self._find(self.tasks, task_id)
        if index is None:
            return None
        task = self.tasks[index]
        if task.repeat and not task.completed:
            base = task.due_date or self._today()
            next_task = dataclasses.replace(
                task, id=self.id_factory(), completed=False, due_date=base + timedelta(days=1)
            )
            task.completed = True
            self.tasks.append(next_task)
            logger.debug("Repeating task %s rolled over to %s", task_id, next_task.id)
        else:
            task.completed = not task.completed
        self.notify("tasks")
        return task

    def update_task(self, task_id: str, **changes) -> Optional[LocalTask]:
        return self._update("tasks", task_id, changes)

    def delete_task(self, task_id: str) -> None:
        self._delete("tasks", task_id)

    # ── Events ──

    def add_event(self, title: str, date: date, **fields) -> LocalEvent:
        fields.setdefault("color", self.rng.choice(EVENT_COLORS))
        event = LocalEvent(id=self.id_factory(), title=title, date=date, **fields)
        self.events.insert(0, event)
        self.notify("events")
        return event

    def update_event(self, event_id: str, **changes) -> Optional[LocalEvent]:
        return self._update("events", event_id, changes)

    def delete_event(self, event_id: str) -> None:
        self._delete("events", event_id)

    # ── Memories ──

    def add_memory(self, title: str, content: str, date: date, **fields) -> Memory:
        memory = Memory(id=self.id_factory(), title=title, content=content, date=date, **fields)
        self.memories.insert(0, memory)
        self.notify("memories")
        return memory

    def update_memory(self, memory_id: str, **changes) -> Optional[Memory]:
        return self._update("memories", memory_id, changes)

    def delete_memory(self, memory_id: str) -> None:
        self._delete("memories", memory_id)

    # ── Files ──

    def add_file(
        self,
        name: str,
        uploader: str,
        category: str,
        data: Optional[bytes] = None,
        description: Optional[str] = None,
    ) -> FileEntry:
        """
        Record a file. Size and MIME type come from data when given,
        otherwise placeholder values are drawn from the store's rng.
        """
        if data is not None:
            size = len(data)
            mime_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        else:
            size = self.rng.randrange(MAX_PLACEHOLDER_SIZE)
            mime_type = self.rng.choice(PLACEHOLDER_MIME_TYPES)
        entry = FileEntry(
            id=self.id_factory(),
            name=name,
            size=size,
            mime_type=mime_type,
            upload_date=self.clock(),
            uploader=uploader,
            category=category,
            description=description,
        )
        self.files.insert(0, entry)
        self.notify("files")
        return entry

    def delete_file(self, file_id: str) -> None:
        self._delete("files", file_id)

    # ── Social ──

    def register_user(self, user: UserSnapshot) -> None:
        """Make a user discoverable by tag for add_friend."""
        self.directory[user.tag] = user

    def handle_friend_request(self, request_id: str, action) -> Optional[FriendRequest]:
        action = parse_enum(RequestAction, action, "action")
        index = self._find(self.friend_requests, request_id)
        if index is None:
            return None
        request = self.friend_requests.pop(index)
        if action == RequestAction.ACCEPT:
            sender = request.from_user
            self.friends.append(LocalFriend(
                id=sender.id, name=sender.name, avatar=sender.avatar, tag=sender.tag,
                status=PresenceStatus.OFFLINE,
            ))
            self.notify("friends")
            logger.info("Accepted friend request %s from %s", request_id, sender.name)
        self.notify("friend_requests")
        return request

    def add_friend(self, tag: str, from_user: UserSnapshot) -> Optional[FriendRequest]:
        """
        Send a friend request to the user known under tag.

        Returns None for an unknown tag, an existing friend, oneself, or when
        a pending request between the two already exists.
        """
        target = self.directory.get(tag)
        if target is None or target.id == from_user.id:
            return None
        if any(friend.id == target.id for friend in self.friends):
            return None
        if any(
            req.from_user.id == from_user.id and req.to_user_id == target.id
            for req in self.friend_requests
        ):
            return None
        request = FriendRequest(id=self.id_factory(), from_user=from_user, to_user_id=target.id)
        self.friend_requests.append(request)
        self.notify("friend_requests")
        return request

    def send_message(self, content: str, conversation_id: str, sender_id: str) -> ChatMessage:
        message = ChatMessage(
            id=self.id_factory(),
            sender_id=sender_id,
            conversation_id=conversation_id,
            content=content,
            timestamp=self.clock(),
            read=True,
        )
        self.messages.append(message)
        self.notify("messages")
        return message

    # ── Derived views ──

    def open_tasks(self) -> List[LocalTask]:
        return [task for task in self.tasks if not task.completed]

    def events_on(self, day: date) -> List[LocalEvent]:
        return sorted((e for e in self.events if e.date == day), key=lambda e: e.start_time)

    def online_friends(self) -> List[LocalFriend]:
        return [f for f in self.friends if f.status == PresenceStatus.ONLINE]

    def incoming_requests(self, user_id: str) -> List[FriendRequest]:
        return [req for req in self.friend_requests if req.to_user_id == user_id]

    def conversation(self, conversation_id: str) -> List[ChatMessage]:
        """Messages of a direct chat or channel, oldest first."""
        return sorted(
            (m for m in self.messages if m.conversation_id == conversation_id),
            key=lambda m: m.timestamp,
        )

    def last_message(self, conversation_id: str) -> Optional[ChatMessage]:
        messages = self.conversation(conversation_id)
        return messages[-1] if messages else None

    def unread_count(self, conversation_id: str, user_id: str) -> int:
        """Unread messages in the conversation not written by user_id."""
        return sum(
            1 for m in self.messages
            if m.conversation_id == conversation_id and not m.read and m.sender_id != user_id
        )

    def files_in_category(self, category: str) -> List[FileEntry]:
        return [f for f in self.files if f.category == category]

    def search_memories(self, term: Optional[str] = None, mood=None) -> List[Memory]:
        """Case-insensitive match on title, content or tags, optionally narrowed by mood."""
        if mood is not None:
            mood = parse_enum(Mood, mood, "mood")
        needle = term.lower() if term else None
        result = []
        for memory in self.memories:
            if mood is not None and memory.mood != mood:
                continue
            if needle and not (
                needle in memory.title.lower()
                or needle in memory.content.lower()
                or any(needle in tag.lower() for tag in memory.tags)
            ):
                continue
            result.append(memory)
        return result

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """All collections as plain dicts (enum members stay enum members)."""
        return {
            name: [dataclasses.asdict(item) for item in getattr(self, name)]
            for name in (
                "tasks", "events", "memories", "files", "friends",
                "friend_requests", "groups", "messages",
            )
        }
