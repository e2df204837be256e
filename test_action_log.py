import datetime

import pytest

from core.errors import NoActionToUndo
from core.models import ActionRecord, ActionType, Mutation, UserProgress
from services.action_log import ActionLog
from services.progress_service import ProgressService

USER_ID = 777


def test_undo_add_page_round_trip(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=25))
    ProgressService.compute_today_plan(store, USER_ID, today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)

    outcome = ActionLog.undo_last(store, USER_ID, today)

    assert outcome.action.action_type == ActionType.ADD_PAGE
    restored = store.get_user(USER_ID)
    assert restored.pages_memorized == 25
    assert restored.cached_plan_date is None
    assert store.last_action(USER_ID) is None
    assert store.get_stat(USER_ID, today).pages_memorized == 25


def test_undo_without_history_raises(store, today):
    with pytest.raises(NoActionToUndo):
        ActionLog.undo_last(store, USER_ID, today)


def test_undo_walks_back_one_action_at_a_time(store, today):
    ProgressService.apply_mutation(store, USER_ID, Mutation.set_pages(100), today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.set_sections_per_day(3), today)

    ActionLog.undo_last(store, USER_ID, today)
    user = store.get_user(USER_ID)
    assert (user.pages_memorized, user.sections_per_day) == (100, 1)

    ActionLog.undo_last(store, USER_ID, today)
    assert store.get_user(USER_ID).pages_memorized == 0

    with pytest.raises(NoActionToUndo):
        ActionLog.undo_last(store, USER_ID, today)


def test_undo_restores_priority_list_snapshot(store, today):
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_priority([5, 10]), today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.remove_priority([5]), today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.clear_priority(), today)
    assert store.get_user(USER_ID).priority_list == ()

    ActionLog.undo_last(store, USER_ID, today)
    assert store.get_user(USER_ID).priority_list == (10,)
    ActionLog.undo_last(store, USER_ID, today)
    assert store.get_user(USER_ID).priority_list == (5, 10)
    ActionLog.undo_last(store, USER_ID, today)
    assert store.get_user(USER_ID).priority_list == ()


def test_undo_sections_per_day_refreshes_snapshot(store, today):
    ProgressService.apply_mutation(store, USER_ID, Mutation.set_sections_per_day(4), today)
    ActionLog.undo_last(store, USER_ID, today)
    assert store.get_stat(USER_ID, today).pages_repeated == 20


def test_history_is_newest_first_and_limited(store, today):
    for pages in (10, 20, 30):
        ProgressService.apply_mutation(store, USER_ID, Mutation.set_pages(pages), today)

    history = ActionLog.history(store, USER_ID, limit=2)
    assert [a.new_value for a in history] == [30, 20]
    assert all(isinstance(a.created_at, datetime.datetime) for a in history)


def test_describe_scalar_actions():
    assert ActionLog.describe(
        ActionRecord(ActionType.ADD_PAGE, previous_value=4, new_value=5)
    ) == "Добавлена страница: 4 → 5"
    assert ActionLog.describe(
        ActionRecord(ActionType.SET_SECTIONS_PER_DAY, previous_value=1, new_value=3)
    ) == "Джузов в день: 1 → 3"


def test_describe_priority_actions_lists_the_difference():
    added = ActionRecord(ActionType.ADD_PRIORITY, previous_priority_list=(5,), new_priority_list=(5, 7, 9))
    removed = ActionRecord(ActionType.REMOVE_PRIORITY, previous_priority_list=(5, 7), new_priority_list=(7,))
    cleared = ActionRecord(ActionType.CLEAR_PRIORITY, previous_priority_list=(5,), new_priority_list=())
    assert ActionLog.describe(added) == "Добавлены джузы: 7, 9"
    assert ActionLog.describe(removed) == "Удалены джузы: 5"
    assert ActionLog.describe(cleared) == "Очищены все доп. джузы"
