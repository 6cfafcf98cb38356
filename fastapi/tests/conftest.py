"""
Shared fixtures: in-memory stand-ins for the message store and directory.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set

import pytest
from bson import ObjectId

from marketchat.schemas.message import Message, MessageWithParticipants
from marketchat.schemas.user import UserProfile
from marketchat.services.conversation_service import ConversationService
from marketchat.services.message_service import MessageService
from marketchat.services.thread_service import ThreadService


class Clock:
    """Deterministic clock that moves forward one second per tick."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


class InMemoryMessageStore:

    def __init__(self, users: Dict[str, UserProfile], clock: Clock) -> None:
        self.messages: Dict[str, Message] = {}
        self.mark_read_calls: List[List[str]] = []
        self.fail_mark_read = False
        self._users = users
        self._clock = clock

    async def insert_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        listing_id: Optional[str] = None,
    ) -> Message:
        message = Message(
            id=str(ObjectId()),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            listing_id=listing_id,
            read=False,
            created_at=self._clock(),
        )
        self.messages[message.id] = message
        return message

    def add(self, sender_id: str, receiver_id: str, content: str, **fields) -> Message:
        """Seed a message directly, bypassing validation."""
        message = Message(
            id=fields.pop("id", str(ObjectId())),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            created_at=fields.pop("created_at", None) or self._clock(),
            **fields,
        )
        self.messages[message.id] = message
        return message

    async def find_between(self, user_a: str, user_b: str) -> List[Message]:
        pair = {(user_a, user_b), (user_b, user_a)}
        found = [m for m in self.messages.values() if (m.sender_id, m.receiver_id) in pair]
        return sorted(found, key=lambda m: m.sort_key)

    async def find_for_participant(self, user_id: str) -> List[MessageWithParticipants]:
        found = [m for m in self.messages.values() if user_id in (m.sender_id, m.receiver_id)]
        found.sort(key=lambda m: m.sort_key, reverse=True)
        return [
            MessageWithParticipants(
                **m.model_dump(),
                sender=self._profile(m.sender_id),
                receiver=self._profile(m.receiver_id),
            )
            for m in found
        ]

    async def mark_read(self, message_ids: Iterable[str], receiver_id: str) -> int:
        ids = list(message_ids)
        if self.fail_mark_read:
            raise ConnectionError("store unavailable")
        self.mark_read_calls.append(ids)
        modified = 0
        for mid in ids:
            message = self.messages.get(mid)
            if message and message.receiver_id == receiver_id and not message.read:
                self.messages[mid] = message.model_copy(update={"read": True})
                modified += 1
        return modified

    def read_flags(self) -> Dict[str, bool]:
        return {mid: m.read for mid, m in self.messages.items()}

    def _profile(self, user_id: str) -> UserProfile:
        return self._users.get(user_id, UserProfile(id=user_id))


class FakeUserRepository:

    def __init__(self, users: Dict[str, UserProfile]) -> None:
        self._users = users
        self.lookups: List[str] = []

    async def user_exists(self, user_id: str) -> bool:
        self.lookups.append(user_id)
        return user_id in self._users


class FakeListingRepository:

    def __init__(self, listing_ids: Set[str]) -> None:
        self._listing_ids = listing_ids
        self.lookups: List[str] = []

    async def listing_exists(self, listing_id: str) -> bool:
        self.lookups.append(listing_id)
        return listing_id in self._listing_ids


@pytest.fixture
def users() -> Dict[str, UserProfile]:
    return {
        "alice": UserProfile(id="alice", username="alice", profile_picture="/uploads/alice.png"),
        "bob": UserProfile(id="bob", username="bob", profile_picture=None),
        "carol": UserProfile(id="carol", username="carol", profile_picture="/uploads/carol.png"),
    }


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store(users, clock) -> InMemoryMessageStore:
    return InMemoryMessageStore(users, clock)


@pytest.fixture
def user_repo(users) -> FakeUserRepository:
    return FakeUserRepository(users)


@pytest.fixture
def listing_repo() -> FakeListingRepository:
    return FakeListingRepository({"L123", "L456"})


@pytest.fixture
def message_service(store, user_repo, listing_repo) -> MessageService:
    return MessageService(store, user_repo, listing_repo)


@pytest.fixture
def conversation_service(store) -> ConversationService:
    return ConversationService(store)


@pytest.fixture
def thread_service(store) -> ThreadService:
    return ThreadService(store)
