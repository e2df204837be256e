from database.connection import open_connection
from core.errors import StoreUnavailable
from core.models import SECTION_COUNT, UserProgress
import datetime
import json
import logging

_USER_COLUMNS = (
    "user_id, pages_memorized, last_section_used, priority_list, "
    "sections_per_day, cached_plan_date, cached_plan_handle"
)


def _normalize_date(value) -> datetime.date | None:
    if value is None:
        return None
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.datetime):
        return value.date()
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.date.fromisoformat(text[:10])
    except ValueError:
        return None


def decode_priority_list(raw) -> tuple[int, ...]:
    if not raw or raw == "[]":
        return ()
    try:
        values = json.loads(raw)
    except (TypeError, ValueError):
        logging.warning(f"Unreadable priority list dropped: {raw!r}")
        return ()
    sections = set()
    for value in values if isinstance(values, list) else []:
        try:
            number = int(value)
        except (TypeError, ValueError):
            continue
        if 1 <= number <= SECTION_COUNT:
            sections.add(number)
    return tuple(sorted(sections))


def encode_priority_list(sections) -> str:
    return json.dumps(sorted(set(int(s) for s in sections or ())))


def _row_to_user(row) -> UserProgress:
    handle = row["cached_plan_handle"]
    return UserProgress(
        user_id=int(row["user_id"]),
        pages_memorized=int(row["pages_memorized"] or 0),
        last_section_used=int(row["last_section_used"] or 0),
        priority_list=decode_priority_list(row["priority_list"]),
        sections_per_day=int(row["sections_per_day"] or 1),
        cached_plan_date=_normalize_date(row["cached_plan_date"]),
        cached_plan_handle=int(handle) if handle is not None else None,
    )


def get_user_progress(user_id: int) -> UserProgress | None:
    conn = open_connection("get_user_progress")
    try:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_USER_COLUMNS} FROM user_progress WHERE user_id = ?", (user_id,))
        row = cursor.fetchone()
    except Exception as e:
        logging.error(f"Error reading progress of user {user_id}: {e}")
        raise StoreUnavailable("get_user_progress", e) from e
    finally:
        conn.close()
    return _row_to_user(row) if row else None


def get_or_create_user_progress(user_id: int) -> UserProgress:
    user = get_user_progress(user_id)
    if user:
        return user

    conn = open_connection("create_user_progress")
    try:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO user_progress (user_id) VALUES (?) "
            "ON CONFLICT(user_id) DO NOTHING",
            (user_id,),
        )
        conn.commit()
    except Exception as e:
        logging.error(f"Error creating progress for user {user_id}: {e}")
        raise StoreUnavailable("create_user_progress", e) from e
    finally:
        conn.close()

    return get_user_progress(user_id) or UserProgress(user_id=user_id)


def save_user_progress(user: UserProgress):
    """Writes every field of the record in one statement."""
    conn = open_connection("save_user_progress")
    plan_date = user.cached_plan_date.isoformat() if user.cached_plan_date else None
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO user_progress (
                user_id, pages_memorized, last_section_used, priority_list,
                sections_per_day, cached_plan_date, cached_plan_handle
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                pages_memorized = excluded.pages_memorized,
                last_section_used = excluded.last_section_used,
                priority_list = excluded.priority_list,
                sections_per_day = excluded.sections_per_day,
                cached_plan_date = excluded.cached_plan_date,
                cached_plan_handle = excluded.cached_plan_handle,
                updated_at = CURRENT_TIMESTAMP
        """, (
            user.user_id,
            user.pages_memorized,
            user.last_section_used,
            encode_priority_list(user.priority_list),
            user.sections_per_day,
            plan_date,
            user.cached_plan_handle,
        ))
        conn.commit()
    except Exception as e:
        logging.error(f"Error saving progress of user {user.user_id}: {e}")
        raise StoreUnavailable("save_user_progress", e) from e
    finally:
        conn.close()


def get_user_ids_without_plan(today: datetime.date) -> list[int]:
    """Users who have not received a plan for ``today`` yet."""
    conn = open_connection("get_user_ids_without_plan")
    try:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT user_id FROM user_progress "
            "WHERE cached_plan_date IS NULL OR cached_plan_date <> ?",
            (today.isoformat(),),
        )
        rows = cursor.fetchall()
    except Exception as e:
        logging.error(f"Error listing users without plan: {e}")
        raise StoreUnavailable("get_user_ids_without_plan", e) from e
    finally:
        conn.close()
    return [int(row[0]) for row in rows]
