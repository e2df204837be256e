import datetime

from core.models import DailyStat, UserProgress


def needs_recompute(
    user: UserProgress,
    today: datetime.date,
    yesterday_stat: DailyStat | None,
    today_stat: DailyStat | None = None,
) -> bool:
    """
    Whether today's plan must be rebuilt instead of pointing at the cached one.

    Mutations clear ``cached_plan_date`` themselves, so the snapshot comparison
    only catches progress that reached the record some other way. Today's
    snapshot is written by the recompute, so once it holds the current page
    count the comparison stops firing for the rest of the day.
    """
    if user.cached_plan_date is None or user.cached_plan_date != today:
        return True
    if yesterday_stat is None or yesterday_stat.pages_memorized >= user.pages_memorized:
        return False
    return today_stat is None or today_stat.pages_memorized < user.pages_memorized
