import dataclasses
import datetime
import logging

from core import texts
from core.errors import InvalidInput, NoActionToUndo, StoreUnavailable
from core.models import ActionRecord, ActionType, UndoOutcome
from services.stats_service import StatsService
from utils.ops_logging import log_structured


class ActionLog:
    @staticmethod
    def record(store, user_id: int, action: ActionRecord) -> int | None:
        """
        Appends ``action`` to the user's history.
        Returns the new id, or None when the write failed: the mutation it
        describes then simply cannot be undone.
        """
        try:
            return store.append_action(user_id, action)
        except StoreUnavailable as exc:
            log_structured(
                "action_log_failed",
                level=logging.WARNING,
                user_id=user_id,
                action_type=action.action_type.value,
                error=str(exc),
            )
            return None

    @staticmethod
    def discard(store, action_id: int | None):
        """Drops an entry whose mutation never reached the store."""
        if action_id is None:
            return
        try:
            store.delete_action(action_id)
        except StoreUnavailable as exc:
            logging.warning(f"Orphan action {action_id} left in history: {exc}")

    @staticmethod
    def history(store, user_id: int, limit: int = 10) -> list[ActionRecord]:
        return store.recent_actions(user_id, limit)

    @staticmethod
    def undo_last(store, user_id: int, today: datetime.date) -> UndoOutcome:
        action = store.last_action(user_id)
        if action is None:
            raise NoActionToUndo(user_id)

        user = store.get_user(user_id)
        action_type = action.action_type
        if action_type.touches_priority:
            if action.previous_priority_list is None:
                raise InvalidInput("action", f"Action {action.id} has no previous priority list")
            restored = dataclasses.replace(user, priority_list=action.previous_priority_list)
        elif action.previous_value is None:
            raise InvalidInput("action", f"Action {action.id} has no previous value")
        elif action_type.touches_pages:
            restored = dataclasses.replace(user, pages_memorized=action.previous_value)
        elif action_type == ActionType.SET_SECTIONS_PER_DAY:
            restored = dataclasses.replace(user, sections_per_day=action.previous_value)
        else:
            raise InvalidInput("action", f"Unsupported action type {action_type}")

        restored.cached_plan_date = None
        store.save_user(restored)

        stats_recorded = True
        if not action_type.touches_priority:
            stats_recorded = StatsService.try_record_snapshot(store, restored, today)

        store.delete_action(action.id)
        log_structured(
            "undo_applied",
            user_id=user_id,
            action_id=action.id,
            action_type=action_type.value,
            stats_recorded=stats_recorded,
        )
        return UndoOutcome(action=action, user=restored, stats_recorded=stats_recorded)

    @staticmethod
    def describe(action: ActionRecord) -> str:
        action_type = action.action_type
        if action_type == ActionType.ADD_PAGE:
            return texts.HISTORY_ADD_PAGE.format(prev=action.previous_value, new=action.new_value)
        if action_type == ActionType.SET_PAGE_COUNT_MANUAL:
            return texts.HISTORY_SET_PAGES.format(prev=action.previous_value, new=action.new_value)
        if action_type == ActionType.SET_SECTIONS_PER_DAY:
            return texts.HISTORY_SET_SECTIONS_PER_DAY.format(prev=action.previous_value, new=action.new_value)

        before = set(action.previous_priority_list or ())
        after = set(action.new_priority_list or ())
        if action_type == ActionType.ADD_PRIORITY:
            return texts.HISTORY_ADD_PRIORITY.format(sections=texts.join_sections(sorted(after - before)))
        if action_type == ActionType.REMOVE_PRIORITY:
            return texts.HISTORY_REMOVE_PRIORITY.format(sections=texts.join_sections(sorted(before - after)))
        return texts.HISTORY_CLEAR_PRIORITY
