"""
Demo content for the session-only experience: two friends, one pending
request, two groups with channels and a few chat messages.
"""
from datetime import timedelta

from lifesync.application.local_store import LocalDataStore
from lifesync.domain.enums import PresenceStatus, RequestStatus
from lifesync.domain.local_models import (
    Channel,
    ChatMessage,
    FriendRequest,
    Group,
    LocalFriend,
    UserSnapshot,
)

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

DEMO_USER = UserSnapshot(id="1", name="Max Mustermann", avatar=AVATAR_URL.format(seed="Max"), tag="#1337")

LENA = UserSnapshot(id="2", name="Lena Schmidt", avatar=AVATAR_URL.format(seed="Lena"), tag="#5678")
TOM = UserSnapshot(id="3", name="Tom Wagner", avatar=AVATAR_URL.format(seed="Tom"), tag="#9012")
ANNA = UserSnapshot(id="4", name="Anna Becker", avatar=AVATAR_URL.format(seed="Anna"), tag="#4321")


def _friend(user: UserSnapshot, status: PresenceStatus) -> LocalFriend:
    return LocalFriend(id=user.id, name=user.name, avatar=user.avatar, tag=user.tag, status=status)


def seed_demo_data(store: LocalDataStore) -> LocalDataStore:
    """Load the demo collections into store (timestamps relative to store.clock)."""
    now = store.clock()

    for user in (DEMO_USER, LENA, TOM, ANNA):
        store.register_user(user)

    store.friends.extend([
        _friend(LENA, PresenceStatus.ONLINE),
        _friend(TOM, PresenceStatus.AWAY),
    ])
    store.friend_requests.append(
        FriendRequest(id="req1", from_user=ANNA, to_user_id=DEMO_USER.id, status=RequestStatus.PENDING)
    )
    store.groups.extend([
        Group(
            id="group1",
            name="Projekt Alpha",
            icon="🚀",
            members=[DEMO_USER.id, LENA.id],
            channels=[Channel(id="g1c1", name="allgemein"), Channel(id="g1c2", name="planung")],
        ),
        Group(
            id="group2",
            name="Wochenendtrip",
            icon="✈️",
            members=[DEMO_USER.id, TOM.id],
            channels=[Channel(id="g2c1", name="chat")],
        ),
    ])
    store.messages.extend([
        ChatMessage(id="m1", sender_id=LENA.id, conversation_id=LENA.id,
                    content="Hey, wie gehts?", timestamp=now - timedelta(minutes=5), read=False),
        ChatMessage(id="m2", sender_id=LENA.id, conversation_id="g1c1",
                    content="Willkommen im Projekt!", timestamp=now - timedelta(minutes=10), read=True),
        ChatMessage(id="m3", sender_id=DEMO_USER.id, conversation_id="g1c1",
                    content="Danke! Freut mich, dabei zu sein.", timestamp=now - timedelta(minutes=9), read=True),
    ])

    for collection in ("friends", "friend_requests", "groups", "messages"):
        store.notify(collection)
    return store
