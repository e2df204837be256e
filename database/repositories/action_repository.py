from database.connection import open_connection, is_postgres_backend
from database.repositories.user_repository import decode_priority_list, encode_priority_list
from core.errors import StoreUnavailable
from core.models import ActionRecord, ActionType
import datetime
import logging

_ACTION_COLUMNS = (
    "id, user_id, action_type, previous_value, new_value, "
    "previous_priority_list, new_priority_list, created_at"
)


def _to_datetime(value) -> datetime.datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def _row_to_action(row) -> ActionRecord:
    prev_list = row["previous_priority_list"]
    new_list = row["new_priority_list"]
    return ActionRecord(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        action_type=ActionType(row["action_type"]),
        previous_value=row["previous_value"],
        new_value=row["new_value"],
        previous_priority_list=decode_priority_list(prev_list) if prev_list is not None else None,
        new_priority_list=decode_priority_list(new_list) if new_list is not None else None,
        created_at=_to_datetime(row["created_at"]),
    )


def add_action(user_id: int, action: ActionRecord) -> int:
    """Appends an action and returns its id."""
    prev_list = action.previous_priority_list
    new_list = action.new_priority_list
    params = (
        user_id,
        action.action_type.value,
        action.previous_value,
        action.new_value,
        encode_priority_list(prev_list) if prev_list is not None else None,
        encode_priority_list(new_list) if new_list is not None else None,
    )
    sql = """
        INSERT INTO user_actions (
            user_id, action_type, previous_value, new_value,
            previous_priority_list, new_priority_list
        )
        VALUES (?, ?, ?, ?, ?, ?)
    """
    conn = open_connection("add_action")
    try:
        cursor = conn.cursor()
        if is_postgres_backend():
            cursor.execute(sql + " RETURNING id", params)
            action_id = int(cursor.fetchone()[0])
        else:
            cursor.execute(sql, params)
            action_id = int(cursor.lastrowid)
        conn.commit()
    except Exception as e:
        logging.error(f"Error recording action {action.action_type.value} for user {user_id}: {e}")
        raise StoreUnavailable("add_action", e) from e
    finally:
        conn.close()
    return action_id


def get_recent_actions(user_id: int, limit: int = 10) -> list[ActionRecord]:
    # id order is insertion order; created_at can tie within one second.
    conn = open_connection("get_recent_actions")
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_ACTION_COLUMNS} FROM user_actions WHERE user_id = ? "
            "ORDER BY id DESC LIMIT ?",
            (user_id, limit),
        )
        rows = cursor.fetchall()
    except Exception as e:
        logging.error(f"Error reading actions of user {user_id}: {e}")
        raise StoreUnavailable("get_recent_actions", e) from e
    finally:
        conn.close()
    return [_row_to_action(row) for row in rows]


def get_last_action(user_id: int) -> ActionRecord | None:
    actions = get_recent_actions(user_id, limit=1)
    return actions[0] if actions else None


def delete_action(action_id: int):
    conn = open_connection("delete_action")
    try:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM user_actions WHERE id = ?", (action_id,))
        conn.commit()
    except Exception as e:
        logging.error(f"Error deleting action {action_id}: {e}")
        raise StoreUnavailable("delete_action", e) from e
    finally:
        conn.close()
