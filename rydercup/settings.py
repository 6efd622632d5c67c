import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    database_url: str
    admin_pin: str
    frontend_url: str = "http://localhost:3006"
    holes_in_round: int = 18
    unlock_hours_before: int = 24
    expire_days_after: int = 7
    smtp_host: str = ""
    smtp_port: int = 0
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_sender: str = ""
    smtp_use_ssl: bool = False
    smtp_use_tls: bool = True


def _normalize_database_url(value: Optional[str]) -> str:
    if not value:
        return "sqlite:///rydercup.db"
    normalized = value.strip()
    if normalized.startswith("sqlite://"):
        return normalized
    if Path(normalized).suffix:  # treat as direct path
        return f"sqlite:///{normalized}"
    return normalized


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%s (not an integer)", key, value)
        return default


def _flag_from_env(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    return Settings(
        database_url=_normalize_database_url(os.getenv("DATABASE_URL")),
        admin_pin=os.getenv("ADMIN_PIN", "1234"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3006").rstrip("/"),
        holes_in_round=_int_from_env("HOLES_IN_ROUND", 18),
        unlock_hours_before=_int_from_env("UNLOCK_HOURS_BEFORE", 24),
        expire_days_after=_int_from_env("EXPIRE_DAYS_AFTER", 7),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int_from_env("SMTP_PORT", 0),
        smtp_username=os.getenv("SMTP_USERNAME", ""),
        # app passwords are often pasted with spaces
        smtp_password=os.getenv("SMTP_PASSWORD", "").replace(" ", ""),
        smtp_sender=os.getenv("SMTP_SENDER", ""),
        smtp_use_ssl=_flag_from_env("SMTP_USE_SSL", False),
        smtp_use_tls=_flag_from_env("SMTP_USE_TLS", True),
    )
