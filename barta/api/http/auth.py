from fastapi import APIRouter, Depends, HTTPException, status

from barta.core.exceptions import AuthError, ValidationError
from barta.core.schemas import SuccessResponse
from barta.db.store import Database, get_db
from barta.domains.identity.schemas import (
    UserCreate, UserLogin, SessionRequest, UserResponse, LoginResponse
)
from barta.domains.identity.services import IdentityService

router = APIRouter(prefix="/api", tags=["authentication"])


@router.post("/register", response_model=UserResponse)
async def register(
    user_data: UserCreate,
    db: Database = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)

    try:
        user = await identity_service.register_user(
            user_data.username, user_data.password, user_data.photo
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )

    return UserResponse(**user.to_public())


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Database = Depends(get_db)
):
    """Вход пользователя"""
    identity_service = IdentityService(db)

    try:
        session_id, user = await identity_service.login_user(login_data.username, login_data.password)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message
        )

    return LoginResponse(session_id=session_id, user=UserResponse(**user.to_public()))


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    data: SessionRequest,
    db: Database = Depends(get_db)
):
    """Выход пользователя"""
    await IdentityService(db).logout_user(data.session_id)
    return SuccessResponse()


@router.post("/heartbeat", response_model=SuccessResponse)
async def heartbeat(
    data: SessionRequest,
    db: Database = Depends(get_db)
):
    """Обновление активности сессии"""
    await IdentityService(db).heartbeat(data.session_id)
    return SuccessResponse()
