from barta.domains.identity.entities import User
from barta.domains.identity.schemas import (
    UserCreate, UserLogin, SessionRequest, UserResponse, UserWithStatus, LoginResponse
)

__all__ = [
    "User",
    "UserCreate", "UserLogin", "SessionRequest",
    "UserResponse", "UserWithStatus", "LoginResponse"
]
