from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel

from marketchat.schemas.user import UserProfile
from marketchat.services.errors import ReadReceiptError


class ReadState(str, Enum):

    UNREAD = "unread"
    READ = "read"


class SendMessageRequest(BaseModel):

    receiver_id: Optional[str] = None
    content: Optional[str] = None
    listing_id: Optional[str] = None


class Message(BaseModel):
    """A single message between two users.

    ``read`` is the persisted form of a two-state machine (Unread -> Read).
    The only legal transition is :meth:`mark_read_by` performed by the
    receiver; a read message never goes back to unread.
    """

    id: str
    sender_id: str
    receiver_id: str
    content: str
    listing_id: Optional[str] = None
    read: bool = False
    created_at: datetime

    @property
    def read_state(self) -> ReadState:
        return ReadState.READ if self.read else ReadState.UNREAD

    @property
    def sort_key(self) -> Tuple[datetime, str]:
        # message id breaks ties between equal timestamps
        return (self.created_at, self.id)

    def counterpart_of(self, viewer_id: str) -> str:
        return self.receiver_id if self.sender_id == viewer_id else self.sender_id

    def is_unread_for(self, viewer_id: str) -> bool:
        return self.receiver_id == viewer_id and self.read_state is ReadState.UNREAD

    def mark_read_by(self, viewer_id: str) -> "Message":
        if self.receiver_id != viewer_id:
            raise ReadReceiptError(f"User {viewer_id} did not receive message {self.id}")
        if self.read_state is ReadState.READ:
            return self
        return self.model_copy(update={"read": True})


class MessageWithParticipants(Message):

    sender: UserProfile
    receiver: UserProfile

    def counterpart_profile(self, viewer_id: str) -> UserProfile:
        return self.receiver if self.sender_id == viewer_id else self.sender


class LastMessage(BaseModel):

    id: str
    content: str
    created_at: datetime
    sender_id: str
    read: bool


class Conversation(BaseModel):
    """Inbox entry: every message exchanged with one counterpart."""

    other_user_id: str
    other_user_username: Optional[str] = None
    other_user_profile_picture: Optional[str] = None
    last_message: LastMessage
    unread_count: int = 0
    listing_id: Optional[str] = None
