from typing import Dict, List

from loguru import logger

from marketchat.repositories.message_repository import MessageRepository
from marketchat.schemas.message import Conversation, LastMessage, MessageWithParticipants


def group_by_counterpart(
    user_id: str, messages: List[MessageWithParticipants]
) -> Dict[str, List[MessageWithParticipants]]:
    """Bucket messages by the other party, whichever direction they flowed."""
    groups: Dict[str, List[MessageWithParticipants]] = {}
    for message in messages:
        groups.setdefault(message.counterpart_of(user_id), []).append(message)
    return groups


def summarize_conversation(
    user_id: str, other_user_id: str, messages: List[MessageWithParticipants]
) -> Conversation:
    last = max(messages, key=lambda m: m.sort_key)
    unread_count = sum(1 for m in messages if m.is_unread_for(user_id))
    other = last.counterpart_profile(user_id)
    return Conversation(
        other_user_id=other_user_id,
        other_user_username=other.username,
        other_user_profile_picture=other.profile_picture,
        last_message=LastMessage(
            id=last.id,
            content=last.content,
            created_at=last.created_at,
            sender_id=last.sender_id,
            read=last.read,
        ),
        unread_count=unread_count,
        listing_id=last.listing_id,
    )


class ConversationService:

    def __init__(self, message_repo: MessageRepository) -> None:
        self._message_repo = message_repo

    async def get_conversations(self, user_id: str) -> List[Conversation]:
        """Inbox for ``user_id``: one entry per counterpart, most recent first."""
        messages = await self._message_repo.find_for_participant(user_id)
        groups = group_by_counterpart(user_id, messages)
        conversations = [summarize_conversation(user_id, key, group) for key, group in groups.items()]
        conversations.sort(
            key=lambda c: (c.last_message.created_at, c.last_message.id),
            reverse=True,
        )
        logger.info("Retrieved {} conversations for user {}", len(conversations), user_id)
        return conversations
