"""Application configuration via environment variables.

Settings are read from ``DOCLEDGER_*`` environment variables and, when
present, from a ``.env`` file in the working directory.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Environment Variables:
        DOCLEDGER_STORE_BACKEND: "memory" or "sql"
        DOCLEDGER_DATABASE_URL: SQLAlchemy URL used by the sql backend
        DOCLEDGER_SECRET_KEY: JWT signing key (MUST be set in production)
        DOCLEDGER_LOG_LEVEL: Logging level (default INFO)
    """

    model_config = SettingsConfigDict(env_prefix="DOCLEDGER_", env_file=".env", extra="ignore")

    APP_NAME: str = "Document Signing Ledger"
    LOG_LEVEL: str = "INFO"

    # Storage
    STORE_BACKEND: str = "memory"
    DATABASE_URL: str = "sqlite:///./docledger.db"

    # Security
    SECRET_KEY: str = "dev-secret-key-CHANGE-IN-PRODUCTION"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
