from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "BARTA"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Каталог с JSON-коллекциями
    data_dir: str = "database"
    default_photo: str = "/avater/luffy.jpg"
    bcrypt_rounds: int = 12

    presence_timeout_seconds: int = 300
    typing_ttl_seconds: int = 5
    call_ring_timeout_seconds: int = 300
    call_idle_timeout_seconds: int = 300
    call_tombstone_seconds: int = 60
    sweep_interval_seconds: int = 120

    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
