from typing import Optional

from barta.db.repositories.base import Repository
from barta.db.store import Database
from barta.domains.calls.entities import Call


class CallRepository(Repository[Call]):
    """Репозиторий звонков"""

    entity = Call

    def __init__(self, db: Database):
        super().__init__(db.calls)

    async def get_by_id(self, call_id: str) -> Optional[Call]:
        return next((c for c in await self.get_all() if c.id == call_id), None)
