from typing import List

from loguru import logger

from marketchat.repositories.message_repository import MessageRepository
from marketchat.schemas.message import Message


class ThreadService:

    def __init__(self, message_repo: MessageRepository) -> None:
        self._message_repo = message_repo

    async def get_conversation_messages(self, user_id: str, other_user_id: str) -> List[Message]:
        """Full thread with the counterpart, oldest first; marks the viewer's unread messages read."""
        messages = await self._message_repo.find_between(user_id, other_user_id)
        messages.sort(key=lambda m: m.sort_key)

        unread_ids = [m.id for m in messages if m.is_unread_for(user_id)]
        if not unread_ids:
            logger.debug("No unread messages for {} from {}", user_id, other_user_id)
            return messages

        await self._message_repo.mark_read(unread_ids, receiver_id=user_id)
        logger.info(
            "Marked {} messages read between {} and {}",
            len(unread_ids),
            user_id,
            other_user_id,
        )
        marked = set(unread_ids)
        return [m.mark_read_by(user_id) if m.id in marked else m for m in messages]
