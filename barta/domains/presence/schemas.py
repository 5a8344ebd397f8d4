from pydantic import Field

from barta.core.schemas import CamelModel


class TypingUpdate(CamelModel):
    user_id: str = Field(..., min_length=1)
    receiver_id: str = Field(..., min_length=1)
    is_typing: bool = False


class TypingStatus(CamelModel):
    is_typing: bool
