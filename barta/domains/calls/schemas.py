from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from barta.core.schemas import CamelModel
from barta.domains.calls.entities import CallType


class CallOfferRequest(CamelModel):
    """Схема для начала звонка"""
    caller_id: str = Field(..., min_length=1)
    receiver_id: str = Field(..., min_length=1)
    offer: Any
    call_type: CallType = CallType.AUDIO

    @field_validator('offer')
    @classmethod
    def validate_offer(cls, v):
        if v is None:
            raise ValueError('Offer is required')
        return v


class CallOfferResponse(CamelModel):
    call_id: str


class CallAnswerRequest(CamelModel):
    call_id: str = Field(..., min_length=1)
    answer: Any

    @field_validator('answer')
    @classmethod
    def validate_answer(cls, v):
        if v is None:
            raise ValueError('Answer is required')
        return v


class IceCandidateRequest(CamelModel):
    call_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    candidate: Any


class CallFinishRequest(CamelModel):
    """Завершение или отклонение звонка"""
    call_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None


class CallCheckResponse(CamelModel):
    """Результат опроса звонков"""
    incoming_call: Optional[Dict[str, Any]] = None
    active_call: Optional[Dict[str, Any]] = None
    ice_candidates: List[Dict[str, Any]] = []
    ended_call: Optional[Dict[str, Any]] = None
