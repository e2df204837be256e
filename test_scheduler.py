import asyncio
import datetime

from core.models import UserProgress
from utils import scheduler


class FakeBot:
    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    async def send_message(self, chat_id, text, **kwargs):
        if chat_id in self.failing:
            raise RuntimeError("bot was blocked by the user")
        self.sent.append(chat_id)


def test_reminders_skip_users_with_todays_plan(store, today, monkeypatch):
    monkeypatch.setattr(scheduler, "local_today", lambda: today)
    monkeypatch.setattr(scheduler, "REMINDER_SEND_DELAY_SEC", 0)
    store.save_user(UserProgress(user_id=1, cached_plan_date=today))
    store.save_user(UserProgress(user_id=2, cached_plan_date=today - datetime.timedelta(days=1)))
    store.save_user(UserProgress(user_id=3))

    bot = FakeBot()
    sent = asyncio.run(scheduler.send_daily_reminders(bot, store))

    assert sent == 2
    assert sorted(bot.sent) == [2, 3]


def test_reminder_failures_do_not_stop_the_run(store, today, monkeypatch):
    monkeypatch.setattr(scheduler, "local_today", lambda: today)
    monkeypatch.setattr(scheduler, "REMINDER_SEND_DELAY_SEC", 0)
    store.save_user(UserProgress(user_id=1))
    store.save_user(UserProgress(user_id=2))

    bot = FakeBot(failing={1})
    assert asyncio.run(scheduler.send_daily_reminders(bot, store)) == 1
    assert bot.sent == [2]
