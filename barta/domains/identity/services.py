import logging
from typing import Any, Dict, List, Optional, Tuple

from barta.core.clock import Clock, now_ms
from barta.core.config import settings
from barta.core.exceptions import AuthError, ValidationError
from barta.db.repositories.base import next_id
from barta.db.repositories.user_repository import UserRepository
from barta.db.store import Database
from barta.domains.identity.entities import User
from barta.domains.presence.services import SessionRegistry

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, db: Database, clock: Clock = now_ms):
        self.clock = clock
        self.user_repository = UserRepository(db)
        self.sessions = SessionRegistry(db, clock=clock)

    async def register_user(self, username: str, password: str, photo: Optional[str] = None) -> User:
        """Регистрация нового пользователя"""
        if not username or not password:
            raise ValidationError("Username and password required")

        now = self.clock()
        async with self.user_repository.transaction() as users:
            # Имена пользователей уникальны с учетом регистра
            if any(u.username == username for u in users):
                raise ValidationError("Username already exists")

            user = User.create_user(
                user_id=next_id((u.id for u in users), now),
                username=username,
                password=password,
                photo=photo or settings.default_photo,
                now=now,
            )
            users.append(user)

        logger.info(f"User {user.username} registered with id {user.id}")
        return user

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_username(username)

        if not user or not user.authenticate(password):
            return None

        if user.needs_rehash:
            await self._upgrade_password(user.id, password)

        return user

    async def login_user(self, username: str, password: str) -> Tuple[str, User]:
        """Вход пользователя и создание сессии"""
        user = await self.authenticate_user(username, password)

        if not user:
            raise AuthError("Invalid credentials")

        session_id = await self.sessions.create(user.id, user.username)
        logger.info(f"User {user.username} logged in")
        return session_id, user

    async def logout_user(self, session_id: str) -> None:
        await self.sessions.end(session_id)

    async def heartbeat(self, session_id: str) -> None:
        await self.sessions.touch(session_id)

    async def list_users(self, current_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Список пользователей, кроме текущего, со статусом присутствия"""
        users = await self.user_repository.list_except(current_user_id)
        active_sessions = await self.sessions.list_active()

        return [
            {**user.to_public(), "online": SessionRegistry.is_online(user.id, active_sessions)}
            for user in users
        ]

    async def _upgrade_password(self, user_id: str, password: str) -> None:
        """Замена пароля в открытом виде на хеш"""
        async with self.user_repository.transaction() as users:
            for user in users:
                if user.id == user_id and user.needs_rehash:
                    user.set_password(password)
        logger.info(f"Upgraded legacy password storage for user {user_id}")
