import os
from dotenv import load_dotenv
from dataclasses import dataclass

load_dotenv()

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _resolve_db_path(raw_path: str) -> str:
    candidate = (raw_path or "").strip() or "./hifz.db"
    candidate = os.path.expanduser(candidate)
    if os.path.isabs(candidate):
        return os.path.abspath(candidate)
    return os.path.abspath(os.path.join(_PROJECT_ROOT, candidate))


def _join_webhook_url(base_url: str, path: str) -> str:
    clean_base = (base_url or "").strip().rstrip("/")
    clean_path = (path or "").strip()
    if not clean_base:
        return ""
    if not clean_path.startswith("/"):
        clean_path = "/" + clean_path
    return clean_base + clean_path


def parse_hh_mm(value: str, default: tuple[int, int] = (8, 0)) -> tuple[int, int]:
    try:
        hour_str, minute_str = (value or "").strip().split(":", 1)
        hour, minute = int(hour_str), int(minute_str)
    except ValueError:
        return default
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return default
    return hour, minute


@dataclass(frozen=True)
class Config:
    bot_token: str = os.getenv("BOT_TOKEN", "")
    admin_id: int = int(os.getenv("ADMIN_ID", "0"))
    db_backend: str = os.getenv("DB_BACKEND", "sqlite").strip().lower()
    database_url: str = os.getenv("DATABASE_URL", "").strip()
    db_pool_min_size: int = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
    db_pool_max_size: int = int(os.getenv("DB_POOL_MAX_SIZE", "20"))
    db_path: str = _resolve_db_path(os.getenv("DB_PATH", "./hifz.db"))

    # Calendar day boundaries and reminders
    timezone: str = os.getenv("TIMEZONE", "Europe/Moscow").strip()
    reminder_enabled: bool = os.getenv("REMINDER_ENABLED", "True").lower() == "true"
    reminder_time: str = os.getenv("REMINDER_TIME", "08:00").strip()

    # History screen
    history_limit: int = int(os.getenv("HISTORY_LIMIT", "10"))

    # Delivery
    delivery_mode: str = os.getenv("DELIVERY_MODE", "polling").strip().lower()
    webhook_host: str = os.getenv("WEBHOOK_HOST", "0.0.0.0").strip()
    webhook_port: int = int(os.getenv("PORT", os.getenv("WEBHOOK_PORT", "8080")))
    webhook_path: str = os.getenv("WEBHOOK_PATH", "/telegram/webhook").strip()
    webhook_secret_token: str = os.getenv("WEBHOOK_SECRET_TOKEN", "").strip()
    webhook_url: str = (
        os.getenv("WEBHOOK_URL", "").strip()
        or _join_webhook_url(os.getenv("WEBHOOK_BASE_URL", "").strip(), os.getenv("WEBHOOK_PATH", "/telegram/webhook").strip())
    )

# Global Instance
settings = Config()
