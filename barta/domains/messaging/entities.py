from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Message:
    """Текстовое сообщение от sender_id к receiver_id"""

    id: str
    sender_id: str
    receiver_id: str
    text: str
    timestamp: str
    read: bool = False

    def between(self, user_a: str, user_b: str) -> bool:
        """Принадлежит ли сообщение переписке двух пользователей, в любом направлении"""
        return (self.sender_id == user_a and self.receiver_id == user_b) or (
            self.sender_id == user_b and self.receiver_id == user_a
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "receiverId": self.receiver_id,
            "text": self.text,
            "timestamp": self.timestamp,
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=str(data["id"]),
            sender_id=str(data["senderId"]),
            receiver_id=str(data["receiverId"]),
            text=data.get("text", ""),
            timestamp=data.get("timestamp", ""),
            read=bool(data.get("read", False)),
        )
