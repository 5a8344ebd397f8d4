from fastapi import APIRouter, Depends

from barta.core.schemas import SuccessResponse
from barta.db.store import Database, get_db
from barta.domains.presence.schemas import TypingStatus, TypingUpdate
from barta.domains.presence.services import TypingRegistry

router = APIRouter(prefix="/api/typing", tags=["typing"])


@router.post("", response_model=SuccessResponse)
async def set_typing(
    data: TypingUpdate,
    db: Database = Depends(get_db)
):
    await TypingRegistry(db).set_typing(data.user_id, data.receiver_id, data.is_typing)
    return SuccessResponse()


@router.get("/{user_id}/{receiver_id}", response_model=TypingStatus)
async def get_typing(
    user_id: str,
    receiver_id: str,
    db: Database = Depends(get_db)
):
    """Печатает ли user_id сообщение для receiver_id"""
    is_typing = await TypingRegistry(db).is_typing(user_id, receiver_id)
    return TypingStatus(is_typing=is_typing)
