from database.connection import open_connection
from database.repositories.user_repository import _normalize_date
from core.errors import StoreUnavailable
from core.models import DailyStat
import datetime
import logging

_STAT_COLUMNS = (
    "stat_date, pages_memorized, base_section_count, total_section_count, "
    "daily_progress_pages, sections_per_day, pages_repeated"
)


def _row_to_stat(row) -> DailyStat:
    return DailyStat(
        stat_date=_normalize_date(row["stat_date"]),
        pages_memorized=int(row["pages_memorized"] or 0),
        base_section_count=int(row["base_section_count"] or 0),
        total_section_count=int(row["total_section_count"] or 0),
        daily_progress_pages=int(row["daily_progress_pages"] or 0),
        sections_per_day=int(row["sections_per_day"] or 1),
        pages_repeated=int(row["pages_repeated"] or 0),
    )


def get_daily_stat(user_id: int, stat_date: datetime.date) -> DailyStat | None:
    conn = open_connection("get_daily_stat")
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_STAT_COLUMNS} FROM daily_stats WHERE user_id = ? AND stat_date = ?",
            (user_id, stat_date.isoformat()),
        )
        row = cursor.fetchone()
    except Exception as e:
        logging.error(f"Error reading stat {stat_date} of user {user_id}: {e}")
        raise StoreUnavailable("get_daily_stat", e) from e
    finally:
        conn.close()
    return _row_to_stat(row) if row else None


def get_daily_stats_between(
    user_id: int,
    start: datetime.date | None = None,
    end: datetime.date | None = None,
) -> list[DailyStat]:
    """Snapshots ordered by date; open bounds mean the whole history."""
    clauses = ["user_id = ?"]
    params: list = [user_id]
    if start is not None:
        clauses.append("stat_date >= ?")
        params.append(start.isoformat())
    if end is not None:
        clauses.append("stat_date <= ?")
        params.append(end.isoformat())

    conn = open_connection("get_daily_stats_between")
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_STAT_COLUMNS} FROM daily_stats WHERE {' AND '.join(clauses)} "
            "ORDER BY stat_date ASC",
            tuple(params),
        )
        rows = cursor.fetchall()
    except Exception as e:
        logging.error(f"Error reading stats of user {user_id}: {e}")
        raise StoreUnavailable("get_daily_stats_between", e) from e
    finally:
        conn.close()
    return [_row_to_stat(row) for row in rows]


def upsert_daily_stat(user_id: int, stat: DailyStat):
    conn = open_connection("upsert_daily_stat")
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO daily_stats (
                user_id, stat_date, pages_memorized, base_section_count,
                total_section_count, daily_progress_pages, sections_per_day, pages_repeated
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, stat_date) DO UPDATE SET
                pages_memorized = excluded.pages_memorized,
                base_section_count = excluded.base_section_count,
                total_section_count = excluded.total_section_count,
                daily_progress_pages = excluded.daily_progress_pages,
                sections_per_day = excluded.sections_per_day,
                pages_repeated = excluded.pages_repeated
        """, (
            user_id,
            stat.stat_date.isoformat(),
            stat.pages_memorized,
            stat.base_section_count,
            stat.total_section_count,
            stat.daily_progress_pages,
            stat.sections_per_day,
            stat.pages_repeated,
        ))
        conn.commit()
    except Exception as e:
        logging.error(f"Error upserting stat {stat.stat_date} of user {user_id}: {e}")
        raise StoreUnavailable("upsert_daily_stat", e) from e
    finally:
        conn.close()
