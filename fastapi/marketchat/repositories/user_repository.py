from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from marketchat.models.user import UserDocument
from marketchat.utils.ids import to_object_id


class UserRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("users")

    async def get_user_by_id(self, user_id: str) -> Optional[UserDocument]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._collection.find_one({"_id": oid}, {"username": 1, "profile_picture": 1})

    async def user_exists(self, user_id: str) -> bool:
        return await self.get_user_by_id(user_id) is not None
