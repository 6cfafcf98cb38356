from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from marketchat.config import Settings, get_settings
from marketchat.database.connection import mongo_db_dependency
from marketchat.repositories.listing_repository import ListingRepository
from marketchat.repositories.message_repository import MessageRepository
from marketchat.repositories.user_repository import UserRepository
from marketchat.schemas.message import SendMessageRequest
from marketchat.services.conversation_service import ConversationService
from marketchat.services.errors import ListingNotFoundError, ReceiverNotFoundError
from marketchat.services.message_service import MessageService
from marketchat.services.thread_service import ThreadService
from marketchat.utils.dependencies import get_current_user_id
from marketchat.utils.ids import canonical_id


router = APIRouter(prefix="/api/messages", tags=["messages"])


def get_message_repository(
    db=Depends(mongo_db_dependency), settings: Settings = Depends(get_settings)
) -> MessageRepository:
    return MessageRepository(db, use_transactions=settings.mongodb_use_transactions)


def get_user_repository(db=Depends(mongo_db_dependency)) -> UserRepository:
    return UserRepository(db)


def get_message_service(
    db=Depends(mongo_db_dependency),
    message_repo: MessageRepository = Depends(get_message_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> MessageService:
    return MessageService(message_repo, user_repo, ListingRepository(db))


def get_conversation_service(
    message_repo: MessageRepository = Depends(get_message_repository),
) -> ConversationService:
    return ConversationService(message_repo)


def get_thread_service(
    message_repo: MessageRepository = Depends(get_message_repository),
) -> ThreadService:
    return ThreadService(message_repo)


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def _validated_content(body: SendMessageRequest, sender_id: str, max_length: int) -> str:
    if not body.receiver_id:
        raise _error(status.HTTP_400_BAD_REQUEST, "MISSING_RECEIVER", "Receiver ID is required")
    if not body.content:
        raise _error(status.HTTP_400_BAD_REQUEST, "MISSING_CONTENT", "Message content is required")
    content = body.content.strip()
    if not content:
        raise _error(status.HTTP_400_BAD_REQUEST, "EMPTY_CONTENT", "Message content cannot be empty")
    if len(content) > max_length:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "CONTENT_TOO_LONG",
            f"Message content cannot exceed {max_length} characters",
        )
    if canonical_id(body.receiver_id) == sender_id:
        raise _error(status.HTTP_400_BAD_REQUEST, "INVALID_RECEIVER", "Cannot send message to yourself")
    return content


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_message(
    body: SendMessageRequest,
    current_user_id: str = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    content = _validated_content(body, current_user_id, settings.message_max_length)
    try:
        message = await service.send_message(
            sender_id=current_user_id,
            receiver_id=canonical_id(body.receiver_id),
            content=content,
            listing_id=canonical_id(body.listing_id) if body.listing_id else None,
        )
    except ReceiverNotFoundError:
        raise _error(status.HTTP_404_NOT_FOUND, "RECEIVER_NOT_FOUND", "The specified receiver does not exist")
    except ListingNotFoundError:
        raise _error(status.HTTP_404_NOT_FOUND, "LISTING_NOT_FOUND", "The specified listing does not exist")
    return {"message": message}


@router.get("")
async def list_conversations(
    current_user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    conversations = await service.get_conversations(current_user_id)
    return {"conversations": conversations}


@router.get("/{other_user_id}")
async def get_conversation_messages(
    other_user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    user_repo: UserRepository = Depends(get_user_repository),
    service: ThreadService = Depends(get_thread_service),
) -> Dict[str, Any]:
    other_user_id = canonical_id(other_user_id)
    if not await user_repo.user_exists(other_user_id):
        raise _error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "The specified user does not exist")
    if other_user_id == current_user_id:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "INVALID_CONVERSATION",
            "Cannot view conversation with yourself",
        )
    messages = await service.get_conversation_messages(current_user_id, other_user_id)
    return {"messages": messages}
