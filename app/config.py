import os
from typing import Literal

from pydantic import BaseModel

VERSION = "1.0.0"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


class Settings(BaseModel):
    port: int = 4000
    env: Literal["development", "staging", "production"] = "development"
    db_dsn: str = "greenlight.db"
    db_timeout: float = 5.0
    max_body_bytes: int = 1_048_576
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        port=_env_int("GREENLIGHT_PORT", 4000),
        env=os.getenv("GREENLIGHT_ENV", "development"),
        db_dsn=os.getenv("GREENLIGHT_DB_DSN", "greenlight.db"),
        db_timeout=_env_float("GREENLIGHT_DB_TIMEOUT", 5.0),
        max_body_bytes=_env_int("GREENLIGHT_MAX_BODY_BYTES", 1_048_576),
        log_level=os.getenv("GREENLIGHT_LOG_LEVEL", "INFO").upper(),
    )
