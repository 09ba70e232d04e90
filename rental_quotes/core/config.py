# rental_quotes/core/config.py
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv
from fastapi import Request


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# -----------------------
# Settings
# -----------------------
@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str = "sqlite+aiosqlite:///./rental_quotes.db"
    db_echo: bool = False
    db_ssl: bool = False
    # seconds a SQLite writer waits for the database lock
    db_busy_timeout: float = 30.0

    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    api_prefix: str = "/api/v1"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    environment: str = "development"

    quotation_number_retries: int = 5

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            raise ValueError("JWT_SECRET environment variable must be set")

        database_url = os.getenv("DATABASE_URL", cls.database_url)
        if not database_url.startswith(("sqlite+aiosqlite", "postgresql+asyncpg")):
            raise ValueError(f"Unsupported DATABASE_URL driver: {database_url.split(':', 1)[0]}")

        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            jwt_secret=jwt_secret,
            database_url=database_url,
            db_echo=_env_bool("DB_ECHO"),
            db_ssl=_env_bool("DB_SSL"),
            db_busy_timeout=float(os.getenv("DB_BUSY_TIMEOUT", cls.db_busy_timeout)),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)
            ),
            api_prefix=os.getenv("API_PREFIX", cls.api_prefix),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            environment=os.getenv("ENVIRONMENT", cls.environment),
            quotation_number_retries=int(
                os.getenv("QUOTATION_NUMBER_RETRIES", cls.quotation_number_retries)
            ),
        )


# -----------------------
# FastAPI dependency
# -----------------------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings
