from barta.db.repositories.base import Repository
from barta.db.store import Database
from barta.domains.presence.entities import Session, TypingState


class SessionRepository(Repository[Session]):
    """Репозиторий сессий"""

    entity = Session

    def __init__(self, db: Database):
        super().__init__(db.sessions)


class TypingRepository(Repository[TypingState]):
    """Репозиторий индикаторов набора текста"""

    entity = TypingState

    def __init__(self, db: Database):
        super().__init__(db.typing)
