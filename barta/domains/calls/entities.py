import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class CallStatus(enum.Enum):
    RINGING = "ringing"
    ACTIVE = "active"
    ENDED = "ended"
    REJECTED = "rejected"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in (CallStatus.ENDED, CallStatus.REJECTED, CallStatus.EXPIRED)


class CallType(enum.Enum):
    AUDIO = "audio"
    VIDEO = "video"


@dataclass
class IceCandidate:
    """ICE-кандидат, пересылаемый собеседнику без разбора"""

    user_id: str
    candidate: Any
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "candidate": self.candidate, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IceCandidate":
        return cls(user_id=str(data["userId"]), candidate=data.get("candidate"), timestamp=int(data["timestamp"]))


@dataclass
class Call:
    """
    Звонок между двумя пользователями.

    Переходы статуса: ringing -> active -> ended, а также
    ringing -> rejected и ringing/active -> expired. Завершенные звонки
    хранятся некоторое время, чтобы опрашивающий собеседник увидел,
    чем закончился звонок.
    """

    id: str
    caller_id: str
    receiver_id: str
    call_type: CallType
    offer: Any
    timestamp: int
    status: CallStatus = CallStatus.RINGING
    answer: Any = None
    ice_candidates: List[IceCandidate] = field(default_factory=list)
    updated_at: Optional[int] = None
    ended_at: Optional[int] = None
    ended_by: Optional[str] = None

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.timestamp

    def involves(self, user_id: str) -> bool:
        return user_id in (self.caller_id, self.receiver_id)

    def connects(self, user_a: str, user_b: str) -> bool:
        """Звонок между парой пользователей, независимо от того, кто звонит"""
        return {self.caller_id, self.receiver_id} == {user_a, user_b}

    def accept(self, answer: Any, now: int) -> None:
        """Ответ на звонок: ringing -> active"""
        if self.status.is_terminal:
            raise ValueError(f"Call {self.id} is already {self.status.value}")
        self.answer = answer
        self.status = CallStatus.ACTIVE
        self.updated_at = now

    def add_candidate(self, user_id: str, candidate: Any, now: int) -> IceCandidate:
        if self.status.is_terminal:
            raise ValueError(f"Call {self.id} is already {self.status.value}")
        ice = IceCandidate(user_id=user_id, candidate=candidate, timestamp=now)
        self.ice_candidates.append(ice)
        self.updated_at = now
        return ice

    def finish(self, status: CallStatus, now: int, user_id: Optional[str] = None) -> bool:
        """Перевод в терминальное состояние; повторный вызов ничего не меняет"""
        if self.status.is_terminal:
            return False
        self.status = status
        self.ended_at = now
        self.ended_by = user_id
        self.updated_at = now
        return True

    def candidates_for(self, user_id: str, since: int) -> List[IceCandidate]:
        """Кандидаты собеседника, появившиеся после since"""
        return [c for c in self.ice_candidates if c.user_id != user_id and c.timestamp > since]

    def is_ring_timed_out(self, now: int, timeout_ms: int) -> bool:
        return self.status is CallStatus.RINGING and now - self.timestamp >= timeout_ms

    def is_idle(self, now: int, timeout_ms: int) -> bool:
        return self.status is CallStatus.ACTIVE and now - self.updated_at >= timeout_ms

    def is_tombstone_expired(self, now: int, retention_ms: int) -> bool:
        return self.status.is_terminal and now - (self.ended_at or self.updated_at) >= retention_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "callerId": self.caller_id,
            "receiverId": self.receiver_id,
            "callType": self.call_type.value,
            "offer": self.offer,
            "answer": self.answer,
            "status": self.status.value,
            "iceCandidates": [c.to_dict() for c in self.ice_candidates],
            "timestamp": self.timestamp,
            "updatedAt": self.updated_at,
            "endedAt": self.ended_at,
            "endedBy": self.ended_by,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Call":
        return cls(
            id=str(data["id"]),
            caller_id=str(data["callerId"]),
            receiver_id=str(data["receiverId"]),
            call_type=CallType(data.get("callType", CallType.AUDIO.value)),
            offer=data.get("offer"),
            answer=data.get("answer"),
            status=CallStatus(data.get("status", CallStatus.RINGING.value)),
            ice_candidates=[IceCandidate.from_dict(c) for c in data.get("iceCandidates", [])],
            timestamp=int(data["timestamp"]),
            updated_at=data.get("updatedAt"),
            ended_at=data.get("endedAt"),
            ended_by=data.get("endedBy"),
        )
