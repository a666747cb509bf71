"""
Tests for the session-only LocalDataStore
"""
import itertools
import random
from datetime import date, datetime, timedelta, timezone

import pytest

from lifesync.application.local_store import EVENT_COLORS, PLACEHOLDER_MIME_TYPES, LocalDataStore
from lifesync.domain.enums import Mood, PresenceStatus, Priority
from lifesync.domain.errors import ValidationError
from lifesync.domain.local_models import ChatMessage, FriendRequest, LocalFriend, UserSnapshot

NOW = datetime(2026, 2, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    counter = itertools.count(1)
    return LocalDataStore(
        id_factory=lambda: f"id-{next(counter)}",
        clock=lambda: NOW,
        rng=random.Random(42),
    )


@pytest.fixture
def me():
    return UserSnapshot(id="1", name="Max Mustermann", avatar="", tag="#1337")


class TestTasks:
    def test_add_prepends(self, store):
        first = store.add_task("Einkaufen")
        second = store.add_task("Putzen", priority="high")

        assert [t.id for t in store.tasks] == [second.id, first.id]
        assert second.priority is Priority.HIGH
        assert first.completed is False

    def test_toggle_plain_task(self, store):
        task = store.add_task("Einkaufen")
        store.toggle_task(task.id)
        assert task.completed is True
        store.toggle_task(task.id)
        assert task.completed is False
        assert len(store.tasks) == 1

    def test_toggle_repeating_task_appends_next(self, store):
        task = store.add_task("Blumen gießen", repeat=True, due_date=date(2026, 2, 20), category="Haus")

        store.toggle_task(task.id)

        assert task.completed is True
        assert len(store.tasks) == 2
        spawned = store.tasks[-1]
        assert spawned.id != task.id
        assert spawned.completed is False
        assert spawned.repeat is True
        assert spawned.category == "Haus"
        assert spawned.due_date == date(2026, 2, 21)

    def test_repeating_without_due_date_uses_clock(self, store):
        task = store.add_task("Sport", repeat=True)
        store.toggle_task(task.id)
        assert store.tasks[-1].due_date == NOW.date() + timedelta(days=1)

    def test_reopening_repeating_task_keeps_successor(self, store):
        task = store.add_task("Sport", repeat=True)
        store.toggle_task(task.id)
        store.toggle_task(task.id)

        assert task.completed is False
        assert len(store.tasks) == 2

    def test_update_merges(self, store):
        task = store.add_task("Einkaufen")
        updated = store.update_task(task.id, title="Wocheneinkauf", priority="urgent")
        assert updated.title == "Wocheneinkauf"
        assert updated.priority is Priority.URGENT
        assert store.tasks[0] is updated

    def test_update_rejects_bad_enum_and_id(self, store):
        task = store.add_task("Einkaufen")
        with pytest.raises(ValidationError):
            store.update_task(task.id, priority="whenever")
        with pytest.raises(ValidationError):
            store.update_task(task.id, id="other")
        assert store.tasks[0].priority is Priority.MEDIUM

    def test_missing_ids_are_noops(self, store):
        store.add_task("Einkaufen")
        assert store.toggle_task("missing") is None
        assert store.update_task("missing", title="x") is None
        store.delete_task("missing")
        assert len(store.tasks) == 1

    def test_delete(self, store):
        task = store.add_task("Einkaufen")
        store.delete_task(task.id)
        assert store.tasks == []

    def test_open_tasks(self, store):
        done = store.add_task("a")
        store.add_task("b")
        store.toggle_task(done.id)
        assert [t.title for t in store.open_tasks()] == ["b"]


class TestEvents:
    def test_color_from_palette(self, store):
        event = store.add_event("Zahnarzt", date(2026, 2, 14))
        assert event.color in EVENT_COLORS
        assert event.start_time == "12:00"

    def test_events_on_sorted_by_time(self, store):
        store.add_event("Mittag", date(2026, 2, 14), start_time="12:00")
        store.add_event("Frühstück", date(2026, 2, 14), start_time="08:00")
        store.add_event("Morgen", date(2026, 2, 15))

        assert [e.title for e in store.events_on(date(2026, 2, 14))] == ["Frühstück", "Mittag"]

    def test_invalid_calendar_type(self, store):
        with pytest.raises(ValidationError):
            store.add_event("x", date(2026, 2, 14), calendar_type="public")

    def test_update_and_delete(self, store):
        event = store.add_event("Zahnarzt", date(2026, 2, 14))
        store.update_event(event.id, calendar_type="friends")
        assert store.events[0].calendar_type.value == "friends"
        store.delete_event(event.id)
        assert store.events == []


class TestMemories:
    def test_search_by_term_and_mood(self, store):
        store.add_memory("Urlaub", "Strand in Italien", date(2026, 7, 1), mood="happy", tags=["sommer"])
        store.add_memory("Prüfung", "Lange Nacht", date(2026, 2, 1), mood=Mood.STRESSED)

        assert [m.title for m in store.search_memories("italien")] == ["Urlaub"]
        assert [m.title for m in store.search_memories("SOMMER")] == ["Urlaub"]
        assert [m.title for m in store.search_memories(mood="stressed")] == ["Prüfung"]
        assert len(store.search_memories()) == 2

    def test_update_and_delete(self, store):
        memory = store.add_memory("Urlaub", "Strand", date(2026, 7, 1))
        store.update_memory(memory.id, mood="excited")
        assert store.memories[0].mood is Mood.EXCITED
        store.delete_memory(memory.id)
        assert store.memories == []


class TestFiles:
    def test_metadata_from_payload(self, store):
        entry = store.add_file("plan.pdf", uploader="Max", category="Dokumente", data=b"%PDF-1.7")
        assert entry.size == 8
        assert entry.mime_type == "application/pdf"
        assert entry.upload_date == NOW
        assert entry.url == "#"

    def test_placeholder_metadata(self, store):
        entry = store.add_file("foto", uploader="Max", category="Bilder")
        assert 0 <= entry.size < 5 * 1024 * 1024
        assert entry.mime_type in PLACEHOLDER_MIME_TYPES

    def test_category_filter_and_delete(self, store):
        a = store.add_file("a.txt", uploader="Max", category="Dokumente", data=b"a")
        store.add_file("b.jpg", uploader="Max", category="Bilder", data=b"b")
        assert [f.id for f in store.files_in_category("Dokumente")] == [a.id]
        store.delete_file(a.id)
        assert store.files_in_category("Dokumente") == []


class TestSocial:
    def _request(self, store):
        anna = UserSnapshot(id="4", name="Anna Becker", avatar="a.svg", tag="#4321")
        request = FriendRequest(id="req1", from_user=anna, to_user_id="1")
        store.friend_requests.append(request)
        return request

    def test_accept_request(self, store):
        self._request(store)

        store.handle_friend_request("req1", "accept")

        assert store.friend_requests == []
        assert [(f.id, f.name, f.status) for f in store.friends] == [("4", "Anna Becker", PresenceStatus.OFFLINE)]

    def test_decline_request(self, store):
        self._request(store)
        store.handle_friend_request("req1", "decline")
        assert store.friend_requests == []
        assert store.friends == []

    def test_unknown_request_is_noop(self, store):
        assert store.handle_friend_request("missing", "accept") is None

    def test_invalid_action(self, store):
        self._request(store)
        with pytest.raises(ValidationError):
            store.handle_friend_request("req1", "maybe")

    def test_incoming_requests(self, store):
        self._request(store)
        assert [r.id for r in store.incoming_requests("1")] == ["req1"]
        assert store.incoming_requests("2") == []

    def test_add_friend_by_tag(self, store, me):
        store.register_user(UserSnapshot(id="5", name="Jonas", avatar="", tag="#2468"))

        request = store.add_friend("#2468", me)

        assert request.to_user_id == "5"
        assert request.from_user == me
        assert store.friend_requests == [request]

    def test_add_friend_unknown_or_existing(self, store, me):
        lena = UserSnapshot(id="2", name="Lena", avatar="", tag="#5678")
        store.register_user(lena)
        store.friends.append(LocalFriend(id="2", name="Lena", avatar="", tag="#5678"))

        assert store.add_friend("#0000", me) is None
        assert store.add_friend("#5678", me) is None
        assert store.friend_requests == []

    def test_add_friend_twice(self, store, me):
        store.register_user(UserSnapshot(id="5", name="Jonas", avatar="", tag="#2468"))
        store.add_friend("#2468", me)
        assert store.add_friend("#2468", me) is None

    def test_online_friends(self, store):
        store.friends.append(LocalFriend(id="2", name="Lena", avatar="", tag="#5678", status="online"))
        store.friends.append(LocalFriend(id="3", name="Tom", avatar="", tag="#9012", status="away"))
        assert [f.name for f in store.online_friends()] == ["Lena"]


class TestMessages:
    def test_send_appends_read_message(self, store):
        message = store.send_message("Hallo!", "2", "1")
        assert store.messages[-1] is message
        assert message.read is True
        assert message.timestamp == NOW

    def test_conversation_helpers(self, store):
        store.send_message("eins", "g1c1", "1")
        store.messages.append(ChatMessage(
            id="old", sender_id="2", conversation_id="g1c1", content="null",
            timestamp=NOW - timedelta(minutes=5), read=False,
        ))
        last = store.send_message("zwei", "g1c1", "2")

        assert [m.content for m in store.conversation("g1c1")] == ["null", "eins", "zwei"]
        assert store.last_message("g1c1") is last
        assert store.last_message("empty") is None
        assert store.unread_count("g1c1", "1") == 1
        assert store.unread_count("g1c1", "2") == 0


class TestSubscriptions:
    def test_listeners_notified_until_unsubscribed(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.add_task("a")
        store.add_event("b", date(2026, 2, 14))
        unsubscribe()
        store.add_task("c")

        assert seen == ["tasks", "events"]

    def test_noop_does_not_notify(self, store):
        seen = []
        store.subscribe(seen.append)
        store.delete_task("missing")
        assert seen == []

    def test_snapshot(self, store):
        store.add_task("a")
        snapshot = store.snapshot()
        assert snapshot["tasks"][0]["title"] == "a"
        assert set(snapshot) == {
            "tasks", "events", "memories", "files", "friends",
            "friend_requests", "groups", "messages",
        }
