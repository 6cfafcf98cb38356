from typing import Optional, TypedDict

from bson import ObjectId


class UserDocument(TypedDict, total=False):

    _id: ObjectId
    username: str
    profile_picture: Optional[str]
