from datetime import datetime
from typing import Optional, TypedDict

from bson import ObjectId


class MessageDocument(TypedDict, total=False):
    _id: ObjectId
    sender_id: str
    receiver_id: str
    content: str
    # optional listing the message is about
    listing_id: Optional[str]
    # read receipt, flipped once by the receiver
    read: bool
    created_at: datetime
