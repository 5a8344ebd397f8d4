import secrets

from passlib.context import CryptContext

from barta.core.config import settings

# Контекст для хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    return pwd_context.verify(plain_password[:72], hashed_password)


def get_password_hash(password: str) -> str:
    """Хеширование пароля"""
    return pwd_context.hash(password[:72])


def verify_legacy_password(plain_password: str, stored_password: str) -> bool:
    """Проверка пароля, сохранённого в открытом виде старой версией сервера"""
    return secrets.compare_digest(plain_password.encode(), stored_password.encode())


def create_session_token() -> str:
    """Непредсказуемый идентификатор сессии"""
    return secrets.token_urlsafe(32)
