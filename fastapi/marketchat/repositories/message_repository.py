from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from marketchat.models.message import MessageDocument
from marketchat.schemas.message import Message, MessageWithParticipants
from marketchat.schemas.user import UserProfile


_PROFILE_FIELDS = {"_id": 1, "username": 1, "profile_picture": 1}


def _profile_lookup(id_field: str, as_field: str) -> Dict[str, Any]:
    # user ids are stored as hex strings on messages, ObjectIds on users
    return {
        "$lookup": {
            "from": "users",
            "let": {
                "uid": {
                    "$convert": {
                        "input": f"${id_field}",
                        "to": "objectId",
                        "onError": None,
                        "onNull": None,
                    }
                }
            },
            "pipeline": [
                {"$match": {"$expr": {"$eq": ["$_id", "$$uid"]}}},
                {"$project": _PROFILE_FIELDS},
            ],
            "as": as_field,
        }
    }


class MessageRepository:

    def __init__(self, db: AsyncIOMotorDatabase, use_transactions: bool = False) -> None:
        self._db = db
        self._use_transactions = use_transactions

    @property
    def collection(self):
        return self._db["messages"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("sender_id", ASCENDING), ("created_at", DESCENDING)])
        await self.collection.create_index([("receiver_id", ASCENDING), ("created_at", DESCENDING)])

    async def insert_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        listing_id: Optional[str] = None,
    ) -> Message:
        doc: MessageDocument = {
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "content": content,
            "listing_id": listing_id,
            "read": False,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_message(doc)

    async def find_between(self, user_a: str, user_b: str) -> List[Message]:
        """Every message exchanged by the pair, oldest first."""
        query = {
            "$or": [
                {"sender_id": user_a, "receiver_id": user_b},
                {"sender_id": user_b, "receiver_id": user_a},
            ]
        }
        cursor = self.collection.find(query).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        items = await cursor.to_list(length=None)
        return [_to_message(it) for it in items]

    async def find_for_participant(self, user_id: str) -> List[MessageWithParticipants]:
        """Every message sent or received by ``user_id`` with both profiles joined, newest first."""
        pipeline = [
            {"$match": {"$or": [{"sender_id": user_id}, {"receiver_id": user_id}]}},
            {"$sort": {"created_at": DESCENDING, "_id": DESCENDING}},
            _profile_lookup("sender_id", "sender"),
            _profile_lookup("receiver_id", "receiver"),
            {
                "$addFields": {
                    "sender": {"$arrayElemAt": ["$sender", 0]},
                    "receiver": {"$arrayElemAt": ["$receiver", 0]},
                }
            },
        ]
        items = await self.collection.aggregate(pipeline).to_list(length=None)
        return [_to_message_with_participants(it) for it in items]

    async def mark_read(self, message_ids: Iterable[str], receiver_id: str) -> int:
        """Set ``read`` on the listed messages addressed to ``receiver_id`` in one update."""
        oids = [ObjectId(mid) for mid in message_ids]
        if not oids:
            return 0
        query = {"_id": {"$in": oids}, "receiver_id": receiver_id, "read": False}
        update = {"$set": {"read": True}}
        if self._use_transactions:
            async with await self._db.client.start_session() as session:
                async with session.start_transaction():
                    result = await self.collection.update_many(query, update, session=session)
        else:
            result = await self.collection.update_many(query, update)
        return result.modified_count or 0


def _to_message(doc: MessageDocument) -> Message:
    return Message(
        id=str(doc["_id"]),
        sender_id=doc["sender_id"],
        receiver_id=doc["receiver_id"],
        content=doc["content"],
        listing_id=doc.get("listing_id"),
        read=bool(doc.get("read", False)),
        created_at=_as_utc(doc["created_at"]),
    )


def _to_message_with_participants(doc: Dict[str, Any]) -> MessageWithParticipants:
    message = _to_message(doc)
    return MessageWithParticipants(
        **message.model_dump(),
        sender=_to_profile(doc.get("sender"), message.sender_id),
        receiver=_to_profile(doc.get("receiver"), message.receiver_id),
    )


def _to_profile(doc: Optional[Dict[str, Any]], user_id: str) -> UserProfile:
    if not doc:
        return UserProfile(id=user_id)
    return UserProfile(
        id=str(doc.get("_id", user_id)),
        username=doc.get("username"),
        profile_picture=doc.get("profile_picture"),
    )


def _as_utc(value: datetime) -> datetime:
    # naive datetimes come back from clients created without tz_aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
