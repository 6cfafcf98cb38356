from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from marketchat.models.listing import ListingDocument
from marketchat.utils.ids import to_object_id


class ListingRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("listings")

    async def get_listing_by_id(self, listing_id: str) -> Optional[ListingDocument]:
        oid = to_object_id(listing_id)
        if oid is None:
            return None
        return await self._collection.find_one({"_id": oid}, {"_id": 1})

    async def listing_exists(self, listing_id: str) -> bool:
        return await self.get_listing_by_id(listing_id) is not None
