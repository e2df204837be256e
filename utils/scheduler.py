from apscheduler.schedulers.asyncio import AsyncIOScheduler
from aiogram import Bot
import asyncio
import logging

from core.config import parse_hh_mm, settings
from core.errors import StoreUnavailable
from core.texts import REMINDER_TEXT
from database.connection import get_connection, is_postgres_backend
from database.store import SqlStore
from keyboards.builders import get_main_menu_keyboard
from utils.clock import local_today
from utils.ops_logging import log_structured

SCHEDULER_JOB_ID_REMINDER = "send_daily_reminders"
SCHEDULER_ADVISORY_LOCK_KEY = 60430001
REMINDER_SEND_DELAY_SEC = 0.05

_scheduler: AsyncIOScheduler | None = None
_scheduler_leader_conn = None


def _acquire_scheduler_leader_lock() -> bool:
    """Only one replica sharing a Postgres database sends reminders."""
    global _scheduler_leader_conn
    if not is_postgres_backend():
        return True
    try:
        conn = get_connection()
        cur = conn.cursor()
        cur.execute("SELECT pg_try_advisory_lock(?)", (SCHEDULER_ADVISORY_LOCK_KEY,))
        row = cur.fetchone()
        if row and row[0]:
            _scheduler_leader_conn = conn
            return True
        conn.close()
        return False
    except Exception as exc:
        logging.exception("Scheduler leader lock check failed: %s", exc)
        return False


def _release_scheduler_leader_lock():
    global _scheduler_leader_conn
    if _scheduler_leader_conn is None:
        return
    try:
        cur = _scheduler_leader_conn.cursor()
        cur.execute("SELECT pg_advisory_unlock(?)", (SCHEDULER_ADVISORY_LOCK_KEY,))
        _scheduler_leader_conn.close()
    except Exception as exc:
        logging.warning(f"Failed to release scheduler lock: {exc}")
    _scheduler_leader_conn = None


async def send_daily_reminders(bot: Bot, store: SqlStore | None = None) -> int:
    """Nudges every user who has not requested today's plan yet."""
    store = store or SqlStore()
    today = local_today()
    try:
        user_ids = store.users_without_plan(today)
    except StoreUnavailable as exc:
        logging.error(f"Reminder run skipped: {exc}")
        return 0

    sent = 0
    for user_id in user_ids:
        try:
            await bot.send_message(
                chat_id=user_id,
                text=REMINDER_TEXT,
                reply_markup=get_main_menu_keyboard(),
                parse_mode="Markdown",
            )
            sent += 1
        except Exception as exc:
            logging.warning(f"Reminder to {user_id} failed: {exc}")
        await asyncio.sleep(REMINDER_SEND_DELAY_SEC)

    log_structured("reminder_sent", date=today, candidates=len(user_ids), sent=sent)
    return sent


async def start_scheduler(bot: Bot):
    global _scheduler
    if not settings.reminder_enabled:
        logging.info("Reminders disabled; scheduler not started.")
        return
    if not _acquire_scheduler_leader_lock():
        logging.warning("Scheduler not started on this replica (leader lock not acquired).")
        _scheduler = None
        return

    hour, minute = parse_hh_mm(settings.reminder_time)
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        send_daily_reminders,
        "cron",
        hour=hour,
        minute=minute,
        timezone=settings.timezone,
        args=[bot],
        id=SCHEDULER_JOB_ID_REMINDER,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.start()
    _scheduler = scheduler
    logging.info("Scheduler started. reminders=%02d:%02d %s", hour, minute, settings.timezone)


def stop_scheduler():
    global _scheduler
    if _scheduler is not None:
        try:
            _scheduler.shutdown(wait=False)
        except Exception as exc:
            logging.warning(f"Scheduler shutdown failed: {exc}")
        _scheduler = None
    _release_scheduler_leader_lock()
