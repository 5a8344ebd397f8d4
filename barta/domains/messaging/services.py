import logging
from typing import List, Optional

from barta.core.clock import Clock, iso_from_ms, now_ms
from barta.core.exceptions import ValidationError
from barta.db.repositories.base import next_id
from barta.db.repositories.message_repository import MessageRepository
from barta.db.store import Database
from barta.domains.messaging.entities import Message

logger = logging.getLogger(__name__)


class MessageService:
    """Сервис обмена сообщениями между парами пользователей"""

    def __init__(self, db: Database, clock: Clock = now_ms):
        self.repository = MessageRepository(db)
        self.clock = clock

    async def send(self, sender_id: str, receiver_id: str, text: str) -> Message:
        """Отправка сообщения"""
        if not sender_id or not receiver_id or not text:
            raise ValidationError("Missing required fields")

        now = self.clock()
        async with self.repository.transaction() as messages:
            message = Message(
                id=next_id((m.id for m in messages), now),
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                timestamp=iso_from_ms(now),
            )
            messages.append(message)

        logger.debug(f"Message {message.id} sent from {sender_id} to {receiver_id}")
        return message

    async def conversation(
        self,
        user_a: str,
        user_b: str,
        since_message_id: Optional[str] = None
    ) -> List[Message]:
        """
        Переписка двух пользователей в хронологическом порядке.

        Если since_message_id найден, возвращаются только сообщения после
        него; неизвестный идентификатор дает всю переписку.
        """
        conversation = await self.repository.get_conversation(user_a, user_b)

        if since_message_id:
            position = next(
                (i for i, m in enumerate(conversation) if m.id == since_message_id), None
            )
            if position is not None:
                conversation = conversation[position + 1:]

        return conversation

    async def mark_read(self, receiver_id: str, sender_id: str) -> int:
        """Отметка прочтения сообщений от sender_id к receiver_id"""
        updated = 0
        async with self.repository.transaction() as messages:
            for message in messages:
                if message.receiver_id == receiver_id and message.sender_id == sender_id and not message.read:
                    message.read = True
                    updated += 1
        return updated
