from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from barta.db.store import Database, get_db
from barta.domains.identity.schemas import UserWithStatus
from barta.domains.identity.services import IdentityService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserWithStatus])
async def get_users(
    current_user_id: Optional[str] = Query(None, alias="currentUserId"),
    db: Database = Depends(get_db)
):
    """Получение списка пользователей со статусом онлайн"""
    identity_service = IdentityService(db)
    users = await identity_service.list_users(current_user_id)
    return [UserWithStatus(**user) for user in users]
