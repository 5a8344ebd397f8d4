from typing import Optional

from pydantic import Field, field_validator

from barta.core.schemas import CamelModel


class UserCredentials(CamelModel):
    """Имя пользователя и пароль"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError('Username must not be blank')
        return v


class UserCreate(UserCredentials):
    """Схема для регистрации пользователя"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)
    photo: Optional[str] = None


class UserLogin(UserCredentials):
    """Схема для входа пользователя"""


class SessionRequest(CamelModel):
    session_id: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """Схема для ответа с данными пользователя"""
    id: str
    username: str
    photo: str


class UserWithStatus(UserResponse):
    online: bool


class LoginResponse(CamelModel):
    session_id: str
    user: UserResponse
