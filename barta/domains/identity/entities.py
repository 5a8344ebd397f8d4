from dataclasses import dataclass
from typing import Any, Dict, Optional

from barta.core.clock import iso_from_ms
from barta.core.security import get_password_hash, verify_legacy_password, verify_password


@dataclass
class User:
    """Сущность пользователя домена Identity"""

    id: str
    username: str
    photo: str
    registered_at: str
    password_hash: Optional[str] = None
    # Пароль в открытом виде, оставшийся от старой версии сервера
    legacy_password: Optional[str] = None

    @classmethod
    def create_user(cls, user_id: str, username: str, password: str, photo: str, now: int) -> "User":
        """Создание нового пользователя с хешированным паролем"""
        return cls(
            id=user_id,
            username=username,
            photo=photo,
            registered_at=iso_from_ms(now),
            password_hash=get_password_hash(password),
        )

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        if self.password_hash:
            return verify_password(password, self.password_hash)
        if self.legacy_password is not None:
            return verify_legacy_password(password, self.legacy_password)
        return False

    @property
    def needs_rehash(self) -> bool:
        return self.password_hash is None

    def set_password(self, password: str) -> None:
        self.password_hash = get_password_hash(password)
        self.legacy_password = None

    def to_public(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "photo": self.photo}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "username": self.username,
            "photo": self.photo,
            "registeredAt": self.registered_at,
        }
        if self.password_hash:
            data["passwordHash"] = self.password_hash
        elif self.legacy_password is not None:
            data["password"] = self.legacy_password
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            username=data["username"],
            photo=data.get("photo") or "",
            registered_at=data.get("registeredAt", ""),
            password_hash=data.get("passwordHash"),
            legacy_password=data.get("password"),
        )
