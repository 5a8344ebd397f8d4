from typing import List

from barta.db.repositories.base import Repository
from barta.db.store import Database
from barta.domains.messaging.entities import Message


class MessageRepository(Repository[Message]):
    """Репозиторий сообщений"""

    entity = Message

    def __init__(self, db: Database):
        super().__init__(db.messages)

    async def get_conversation(self, user_a: str, user_b: str) -> List[Message]:
        """Сообщения между двумя пользователями в порядке хранения"""
        return [m for m in await self.get_all() if m.between(user_a, user_b)]
