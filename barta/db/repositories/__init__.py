from barta.db.repositories.user_repository import UserRepository
from barta.db.repositories.session_repository import SessionRepository, TypingRepository
from barta.db.repositories.message_repository import MessageRepository
from barta.db.repositories.call_repository import CallRepository

__all__ = [
    "UserRepository",
    "SessionRepository",
    "TypingRepository",
    "MessageRepository",
    "CallRepository"
]
