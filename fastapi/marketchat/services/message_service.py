import asyncio
from typing import Optional

from loguru import logger

from marketchat.repositories.listing_repository import ListingRepository
from marketchat.repositories.message_repository import MessageRepository
from marketchat.repositories.user_repository import UserRepository
from marketchat.schemas.message import Message
from marketchat.services.errors import ListingNotFoundError, ReceiverNotFoundError


class MessageService:

    def __init__(
        self,
        message_repo: MessageRepository,
        user_repo: UserRepository,
        listing_repo: ListingRepository,
    ) -> None:
        self._message_repo = message_repo
        self._user_repo = user_repo
        self._listing_repo = listing_repo

    async def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        listing_id: Optional[str] = None,
    ) -> Message:
        """Store a new unread message; receiver and listing are checked first."""
        receiver_exists, listing_exists = await asyncio.gather(
            self._user_repo.user_exists(receiver_id),
            self._listing_exists(listing_id),
        )
        if not receiver_exists:
            raise ReceiverNotFoundError(receiver_id)
        if not listing_exists:
            raise ListingNotFoundError(listing_id)

        message = await self._message_repo.insert_message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            listing_id=listing_id,
        )
        logger.info("Message {} sent from {} to {}", message.id, sender_id, receiver_id)
        return message

    async def _listing_exists(self, listing_id: Optional[str]) -> bool:
        if listing_id is None:
            return True
        return await self._listing_repo.listing_exists(listing_id)
