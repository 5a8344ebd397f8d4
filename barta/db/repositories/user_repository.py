from typing import List, Optional

from barta.db.repositories.base import Repository
from barta.db.store import Database
from barta.domains.identity.entities import User


class UserRepository(Repository[User]):
    """Репозиторий для работы с пользователями"""

    entity = User

    def __init__(self, db: Database):
        super().__init__(db.users)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Получение пользователя по username"""
        return next((u for u in await self.get_all() if u.username == username), None)

    async def list_except(self, user_id: Optional[str]) -> List[User]:
        return [u for u in await self.get_all() if u.id != user_id]
