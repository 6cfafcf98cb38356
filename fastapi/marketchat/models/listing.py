from typing import TypedDict

from bson import ObjectId


class ListingDocument(TypedDict, total=False):

    _id: ObjectId
    title: str
    seller_id: str
