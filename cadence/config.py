"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Cadence"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Supabase ---
    supabase_url: str
    supabase_service_role_key: str  # server-side only, never expose to client
    supabase_db_url: str  # direct postgres connection string for asyncpg
    supabase_jwt_secret: str  # HS256 secret that signs user access tokens
    supabase_jwt_audience: str = "authenticated"

    # --- Calendar ---
    default_timezone: str = "UTC"  # used when the viewer does not send ?tz=

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
