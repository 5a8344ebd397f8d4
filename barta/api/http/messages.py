from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from barta.core.exceptions import ValidationError
from barta.db.store import Database, get_db
from barta.domains.messaging.schemas import (
    MessageCreate, MessageResponse, MarkReadRequest, MarkReadResponse
)
from barta.domains.messaging.services import MessageService

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageResponse)
async def send_message(
    message_data: MessageCreate,
    db: Database = Depends(get_db)
):
    """Отправка сообщения"""
    message_service = MessageService(db)

    try:
        message = await message_service.send(
            message_data.sender_id, message_data.receiver_id, message_data.text
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )

    return MessageResponse(**message.to_dict())


@router.post("/read", response_model=MarkReadResponse)
async def mark_read(
    data: MarkReadRequest,
    db: Database = Depends(get_db)
):
    """Отметка сообщений от senderId как прочитанных получателем userId"""
    updated = await MessageService(db).mark_read(data.user_id, data.sender_id)
    return MarkReadResponse(updated=updated)


@router.get("/{user_id1}/{user_id2}", response_model=List[MessageResponse])
async def get_conversation(
    user_id1: str,
    user_id2: str,
    last_message_id: Optional[str] = Query(None, alias="lastMessageId"),
    db: Database = Depends(get_db)
):
    """Получение переписки двух пользователей"""
    messages = await MessageService(db).conversation(user_id1, user_id2, last_message_id)
    return [MessageResponse(**m.to_dict()) for m in messages]
