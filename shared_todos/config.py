from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./todos.db"
    database_echo: bool = False
    db_timeout_seconds: float = 30.0
    secret_key: str
    algorithm: str = "HS256"
    session_cookie_name: str = "todos_session"
    session_cookie_secure: bool = False
    session_hours: int = 12
    remember_days: int = 30
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")


@lru_cache
def get_settings() -> Settings:
    return Settings()
