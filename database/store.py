import datetime

from core.models import ActionRecord, DailyStat, UserProgress
from database.repositories import action_repository, stats_repository, user_repository


class SqlStore:
    """
    Store collaborator handed to the services.
    Every method either completes against the database or raises StoreUnavailable.
    """

    def get_user(self, user_id: int) -> UserProgress:
        return user_repository.get_or_create_user_progress(user_id)

    def save_user(self, user: UserProgress) -> None:
        user_repository.save_user_progress(user)

    def users_without_plan(self, today: datetime.date) -> list[int]:
        return user_repository.get_user_ids_without_plan(today)

    def get_stat(self, user_id: int, stat_date: datetime.date) -> DailyStat | None:
        return stats_repository.get_daily_stat(user_id, stat_date)

    def upsert_stat(self, user_id: int, stat: DailyStat) -> None:
        stats_repository.upsert_daily_stat(user_id, stat)

    def list_stats(
        self,
        user_id: int,
        start: datetime.date | None = None,
        end: datetime.date | None = None,
    ) -> list[DailyStat]:
        return stats_repository.get_daily_stats_between(user_id, start, end)

    def append_action(self, user_id: int, action: ActionRecord) -> int:
        return action_repository.add_action(user_id, action)

    def last_action(self, user_id: int) -> ActionRecord | None:
        return action_repository.get_last_action(user_id)

    def recent_actions(self, user_id: int, limit: int) -> list[ActionRecord]:
        return action_repository.get_recent_actions(user_id, limit)

    def delete_action(self, action_id: int) -> None:
        action_repository.delete_action(action_id)
