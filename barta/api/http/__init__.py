from barta.api.http.health import router as health_router
from barta.api.http.auth import router as auth_router
from barta.api.http.users import router as users_router
from barta.api.http.messages import router as messages_router
from barta.api.http.typing_status import router as typing_router
from barta.api.http.calls import router as calls_router

__all__ = [
    "health_router",
    "auth_router",
    "users_router",
    "messages_router",
    "typing_router",
    "calls_router"
]
