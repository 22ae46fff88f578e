from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
import os

from dotenv import load_dotenv

# Load environment variables from the project root .env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")

# Local session tokens live for 7 days.
DEFAULT_TOKEN_EXPIRE_MINUTES = 7 * 24 * 60


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once from the environment."""

    database_url: str = "sqlite:///./taskboard.db"
    secret_key: str = "change-me"
    access_token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    cors_origins: tuple = ("http://localhost:5173",)
    external_auth_secret: Optional[str] = None
    external_auth_audience: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cookie_secure: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(DEFAULT_TOKEN_EXPIRE_MINUTES))
            ),
            cors_origins=tuple(_split_origins(os.getenv("CORS_ORIGINS", "http://localhost:5173"))),
            external_auth_secret=os.getenv("EXTERNAL_AUTH_SECRET") or None,
            external_auth_audience=os.getenv("EXTERNAL_AUTH_AUDIENCE") or None,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            log_file=os.getenv("LOG_FILE") or None,
            cookie_secure=_as_bool(os.getenv("COOKIE_SECURE", "false")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
