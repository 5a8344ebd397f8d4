from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Session:
    """Сессия пользователя, поддерживаемая heartbeat-запросами"""

    session_id: str
    user_id: str
    username: str
    last_active: int

    def touch(self, now: int) -> None:
        self.last_active = now

    def is_stale(self, now: int, timeout_ms: int) -> bool:
        return now - self.last_active >= timeout_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "username": self.username,
            "lastActive": self.last_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            session_id=data["sessionId"],
            user_id=str(data["userId"]),
            username=data.get("username", ""),
            last_active=int(data["lastActive"]),
        )


@dataclass
class TypingState:
    """Флаг "печатает" от user_id к receiver_id"""

    user_id: str
    receiver_id: str
    timestamp: int

    def matches(self, user_id: str, receiver_id: str) -> bool:
        return self.user_id == user_id and self.receiver_id == receiver_id

    def is_expired(self, now: int, ttl_ms: int) -> bool:
        return now - self.timestamp >= ttl_ms

    def to_dict(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "receiverId": self.receiver_id, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypingState":
        return cls(
            user_id=str(data["userId"]),
            receiver_id=str(data["receiverId"]),
            timestamp=int(data["timestamp"]),
        )
