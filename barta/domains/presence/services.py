import logging
from typing import Iterable, List, Optional

from barta.core.clock import Clock, now_ms
from barta.core.config import settings
from barta.core.security import create_session_token
from barta.db.repositories.session_repository import SessionRepository, TypingRepository
from barta.db.store import Database
from barta.domains.presence.entities import Session, TypingState

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Активные сессии пользователей.

    Присутствие вычисляется только по давности последнего heartbeat:
    клиент, переставший опрашивать сервер, считается оффлайн после того,
    как очередная очистка обнаружит, что порог превышен.
    """

    def __init__(self, db: Database, clock: Clock = now_ms, timeout_seconds: Optional[int] = None):
        self.repository = SessionRepository(db)
        self.clock = clock
        if timeout_seconds is None:
            timeout_seconds = settings.presence_timeout_seconds
        self.timeout_ms = timeout_seconds * 1000

    async def create(self, user_id: str, username: str) -> str:
        """Создание сессии при входе"""
        session = Session(
            session_id=create_session_token(),
            user_id=user_id,
            username=username,
            last_active=self.clock(),
        )
        async with self.repository.transaction() as sessions:
            sessions.append(session)
        logger.info(f"Session created for user {user_id}")
        return session.session_id

    async def touch(self, session_id: str) -> bool:
        """Обновление времени активности; неизвестная сессия игнорируется"""
        async with self.repository.transaction() as sessions:
            session = next((s for s in sessions if s.session_id == session_id), None)
            if session:
                session.touch(self.clock())
        return session is not None

    async def end(self, session_id: str) -> None:
        """Удаление сессии при выходе"""
        async with self.repository.transaction() as sessions:
            sessions[:] = [s for s in sessions if s.session_id != session_id]

    async def list_active(self) -> List[Session]:
        """Удаляет устаревшие сессии и возвращает оставшиеся"""
        now = self.clock()
        async with self.repository.transaction() as sessions:
            active = [s for s in sessions if not s.is_stale(now, self.timeout_ms)]
            removed = len(sessions) - len(active)
            sessions[:] = active
        if removed:
            logger.info(f"Removed {removed} stale sessions")
        return list(active)

    @staticmethod
    def is_online(user_id: str, active_sessions: Iterable[Session]) -> bool:
        return any(s.user_id == user_id for s in active_sessions)


class TypingRegistry:
    """Кратковременные флаги набора текста с истечением по TTL"""

    def __init__(self, db: Database, clock: Clock = now_ms, ttl_seconds: Optional[int] = None):
        self.repository = TypingRepository(db)
        self.clock = clock
        if ttl_seconds is None:
            ttl_seconds = settings.typing_ttl_seconds
        self.ttl_ms = ttl_seconds * 1000

    async def set_typing(self, user_id: str, receiver_id: str, is_typing: bool) -> None:
        now = self.clock()
        async with self.repository.transaction() as states:
            states[:] = [
                s for s in states
                if not s.matches(user_id, receiver_id) and not s.is_expired(now, self.ttl_ms)
            ]
            if is_typing:
                states.append(TypingState(user_id=user_id, receiver_id=receiver_id, timestamp=now))

    async def is_typing(self, user_id: str, receiver_id: str) -> bool:
        """Печатает ли user_id сообщение для receiver_id"""
        now = self.clock()
        async with self.repository.transaction() as states:
            states[:] = [s for s in states if not s.is_expired(now, self.ttl_ms)]
            return any(s.matches(user_id, receiver_id) for s in states)

    async def sweep(self) -> int:
        now = self.clock()
        async with self.repository.transaction() as states:
            fresh = [s for s in states if not s.is_expired(now, self.ttl_ms)]
            removed = len(states) - len(fresh)
            states[:] = fresh
        return removed
