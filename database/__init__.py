import logging

from database.connection import get_connection, is_postgres_backend

# Public API for the database package
from database.repositories.user_repository import (
    get_or_create_user_progress as get_or_create_user_progress,
    get_user_ids_without_plan as get_user_ids_without_plan,
    save_user_progress as save_user_progress,
)
from database.repositories.stats_repository import (
    get_daily_stat as get_daily_stat,
    get_daily_stats_between as get_daily_stats_between,
    upsert_daily_stat as upsert_daily_stat,
)
from database.repositories.action_repository import (
    add_action as add_action,
    delete_action as delete_action,
    get_last_action as get_last_action,
    get_recent_actions as get_recent_actions,
)
from database.store import SqlStore as SqlStore

__all__ = [
    "get_connection",
    "is_postgres_backend",
    "create_table",
    "get_or_create_user_progress",
    "get_user_ids_without_plan",
    "save_user_progress",
    "get_daily_stat",
    "get_daily_stats_between",
    "upsert_daily_stat",
    "add_action",
    "delete_action",
    "get_last_action",
    "get_recent_actions",
    "SqlStore",
]


def create_table():
    """Initializes the database schema."""
    id_column = "BIGSERIAL PRIMARY KEY" if is_postgres_backend() else "INTEGER PRIMARY KEY AUTOINCREMENT"
    conn = get_connection()
    cursor = conn.cursor()

    # user_progress: one row per Telegram user
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS user_progress (
            user_id BIGINT PRIMARY KEY,
            pages_memorized INTEGER DEFAULT 0,
            last_section_used INTEGER DEFAULT 0,
            priority_list TEXT DEFAULT '[]',
            sections_per_day INTEGER DEFAULT 1,
            cached_plan_date TEXT,
            cached_plan_handle BIGINT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # daily_stats: one snapshot per user per calendar date
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS daily_stats (
            user_id BIGINT,
            stat_date TEXT,
            pages_memorized INTEGER DEFAULT 0,
            base_section_count INTEGER DEFAULT 0,
            total_section_count INTEGER DEFAULT 0,
            daily_progress_pages INTEGER DEFAULT 0,
            sections_per_day INTEGER DEFAULT 1,
            pages_repeated INTEGER DEFAULT 0,
            PRIMARY KEY (user_id, stat_date)
        )
    """)

    # user_actions: undo log
    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS user_actions (
            id {id_column},
            user_id BIGINT NOT NULL,
            action_type TEXT NOT NULL,
            previous_value INTEGER,
            new_value INTEGER,
            previous_priority_list TEXT,
            new_priority_list TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_user_actions_user ON user_actions (user_id, id)"
    )

    conn.commit()
    conn.close()
    logging.info("Schema ready (backend=%s)", "postgres" if is_postgres_backend() else "sqlite")
