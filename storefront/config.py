"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

APP_ENV = os.getenv("APP_ENV", "development")

# Environment specific file first so it wins over the shared .env; neither
# overrides variables already present in the process environment.
load_dotenv(f".env.{APP_ENV}")
load_dotenv(".env")

REQUIRED_KEYS = ("DATABASE_URL", "JWT_SECRET")


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _get_flag(name: str, default: str) -> bool:
    return _get_env(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    app_env: str = APP_ENV
    host: str = _get_env("HOST", "127.0.0.1")
    port: int = int(_get_env("PORT", "8000"))
    database_url: str = _get_env("DATABASE_URL", "sqlite:///storefront.db")
    db_echo: bool = _get_flag("DB_ECHO", "false")
    jwt_secret: str = _get_env("JWT_SECRET", "dev-secret")
    jwt_algorithm: str = _get_env("JWT_ALGORITHM", "HS256")
    jwt_expires_in: int = int(_get_env("JWT_EXPIRES_IN", "86400"))
    log_level: str = _get_env("LOG_LEVEL", "INFO")
    log_file: str = _get_env("LOG_FILE", "")
    create_schema_on_startup: bool = _get_flag("CREATE_SCHEMA_ON_STARTUP", "true")
    seed_on_startup: bool = _get_flag("SEED_ON_STARTUP", "false")

    def missing_required(self) -> list[str]:
        """Names of required variables that are unset or blank in the environment."""
        return [name for name in REQUIRED_KEYS if not os.getenv(name, "").strip()]


settings = Settings()
