# clubhouse/core/config.py

import json
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    DATABASE_URL_LOCAL: str = "sqlite:///./clubhouse.db"
    DATABASE_URL_PROD: str = "postgresql://clubhouse:clubhouse@db:5432/clubhouse"

    # Tokens are issued by the identity provider; we only verify them
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # Upper bound on re-invocations of a transaction callback after conflicts
    TRANSACTION_MAX_ATTEMPTS: int = 5

    CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # New member defaults
    BASE_ROLE: str = "Player"
    DEFAULT_THEME: str = "dark"
    DEFAULT_ACCENT_COLOR: str = "#7c3aed"

    @field_validator("TRANSACTION_MAX_ATTEMPTS")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("TRANSACTION_MAX_ATTEMPTS must be at least 1")
        return v

    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string or JSON array"""
        v = (self.CORS_ORIGINS or "").strip()
        if not v:
            return []
        if v.startswith("["):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in v.split(",") if origin.strip()]


settings = Settings()
