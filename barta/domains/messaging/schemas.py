from pydantic import Field

from barta.core.schemas import CamelModel


class MessageCreate(CamelModel):
    """Схема для отправки сообщения"""
    sender_id: str = Field(..., min_length=1)
    receiver_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class MessageResponse(CamelModel):
    """Схема для ответа с сообщением"""
    id: str
    sender_id: str
    receiver_id: str
    text: str
    timestamp: str
    read: bool


class MarkReadRequest(CamelModel):
    """Отметка прочтения: user_id прочитал сообщения от sender_id"""
    user_id: str = Field(..., min_length=1)
    sender_id: str = Field(..., min_length=1)


class MarkReadResponse(CamelModel):
    success: bool = True
    updated: int = 0
