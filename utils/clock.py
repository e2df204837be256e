import datetime
from zoneinfo import ZoneInfo

from core.config import settings


def local_now() -> datetime.datetime:
    return datetime.datetime.now(ZoneInfo(settings.timezone))


def local_today() -> datetime.date:
    """Calendar day the plan and the daily stats are keyed on."""
    return local_now().date()
