import csv
import datetime
import io
import logging

from core.errors import StoreUnavailable
from core.models import PAGES_PER_SECTION, DailyStat, UserProgress, WeeklySummary
from services.section_map import base_section_count
from utils.ops_logging import log_structured

WEEK_DAYS = 7

CSV_HEADER = (
    "date",
    "pages_memorized",
    "base_sections",
    "daily_progress",
    "total_sections",
    "sections_per_day",
    "pages_repeated",
)


class StatsService:
    @staticmethod
    def build_snapshot(
        pages_memorized: int,
        priority_list,
        sections_per_day: int,
        today: datetime.date,
        yesterday: DailyStat | None,
    ) -> DailyStat:
        base_count = base_section_count(pages_memorized)
        previous_pages = yesterday.pages_memorized if yesterday else 0
        return DailyStat(
            stat_date=today,
            pages_memorized=pages_memorized,
            base_section_count=base_count,
            total_section_count=base_count + len(priority_list or ()),
            daily_progress_pages=max(0, pages_memorized - previous_pages),
            sections_per_day=sections_per_day,
            pages_repeated=PAGES_PER_SECTION * sections_per_day,
        )

    @staticmethod
    def record_snapshot(
        store,
        user_id: int,
        pages_memorized: int,
        priority_list,
        sections_per_day: int,
        today: datetime.date,
    ) -> DailyStat:
        """Upserts today's snapshot. Raises StoreUnavailable."""
        yesterday = store.get_stat(user_id, today - datetime.timedelta(days=1))
        stat = StatsService.build_snapshot(pages_memorized, priority_list, sections_per_day, today, yesterday)
        store.upsert_stat(user_id, stat)
        return stat

    @staticmethod
    def try_record_snapshot(store, user: UserProgress, today: datetime.date) -> bool:
        """
        Best-effort variant used beside a primary operation.
        A failure is logged and reported through the return value.
        """
        try:
            StatsService.record_snapshot(
                store,
                user.user_id,
                user.pages_memorized,
                user.priority_list,
                user.sections_per_day,
                today,
            )
        except StoreUnavailable as exc:
            log_structured(
                "stats_snapshot_failed",
                level=logging.WARNING,
                user_id=user.user_id,
                date=today,
                error=str(exc),
            )
            return False
        return True

    @staticmethod
    def weekly_summary(store, user_id: int, today: datetime.date) -> WeeklySummary:
        start = today - datetime.timedelta(days=WEEK_DAYS - 1)
        return WeeklySummary(days=store.list_stats(user_id, start, today))

    @staticmethod
    def export_csv(store, user_id: int) -> str:
        """Whole snapshot history as CSV text; empty string when there is none."""
        stats = store.list_stats(user_id)
        if not stats:
            return ""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for stat in stats:
            writer.writerow((
                stat.stat_date.strftime("%d.%m.%Y"),
                stat.pages_memorized,
                stat.base_section_count,
                stat.daily_progress_pages,
                stat.total_section_count,
                stat.sections_per_day,
                stat.pages_repeated,
            ))
        return buffer.getvalue()
