from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# The repo-root .env wins over the process CWD. Test runs never read it.
_DOTENV = Path(__file__).resolve().parents[1] / ".env"
if _DOTENV.exists() and os.getenv("ENVIRONMENT", "").lower() != "test":
    load_dotenv(dotenv_path=_DOTENV, override=True)


def _parse_origins(raw: Any) -> list[str]:
    """Accept a list, a JSON array string or a comma-separated string of origins."""
    if raw is None:
        return []
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("["):
            try:
                raw = json.loads(text)
            except ValueError:
                raw = text.split(",")
        else:
            raw = text.split(",")
    if not isinstance(raw, (list, tuple, set)):
        raw = [raw]
    return [str(item).strip().rstrip("/") for item in raw if item is not None and str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="Head Huntd API")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # Database configuration
    # DB_URL / ORM_DB_URL take a full SQLAlchemy URL; otherwise the discrete
    # DB_* parts describe a MySQL server.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    orm_use_mysql: bool = Field(default=False, validation_alias="ORM_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="headhuntd", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    # Auth
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24 * 30)
    auth_cookie_name: str = Field(default="token")
    auth_cookie_secure: bool = Field(default=False)
    auth_cookie_samesite: str = Field(default="lax")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    max_login_attempts: int = Field(default=5)
    lockout_minutes: int = Field(default=120)

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )

    # Payments
    stripe_secret_key: str = Field(default="", validation_alias="STRIPE_SECRET_KEY")
    stripe_api_base: str = Field(default="https://api.stripe.com/v1", validation_alias="STRIPE_API_BASE")
    stripe_timeout_seconds: float = Field(default=10.0)
    frontend_url: str = Field(default="http://localhost:3000", validation_alias="FRONTEND_URL")
    checkout_verify_max_attempts: int = Field(default=5, ge=1)
    checkout_verify_delay_seconds: float = Field(default=2.0, ge=0)
    subscription_period_days: int = Field(default=30)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_origins(v)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    # Prefer a dedicated ORM URL if provided.
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    # In development, default ORM to sqlite unless explicitly configured.
    if settings.environment.lower() == "development" and not settings.orm_use_mysql:
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; safest is to rely on DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )
