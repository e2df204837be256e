import datetime

import pytest

from core.errors import InvalidInput, StoreUnavailable
from core.models import Mutation, NothingToReview, PlanAlreadyIssued, ReviewPlan, SectionRef, UserProgress
from services.progress_service import ProgressService

USER_ID = 4242


def test_fresh_user_has_nothing_to_review(store, today):
    outcome = ProgressService.compute_today_plan(store, USER_ID, today)
    assert isinstance(outcome.result, NothingToReview)
    assert outcome.user.cached_plan_date == today


def test_first_plan_reviews_section_one(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=25))
    outcome = ProgressService.compute_today_plan(store, USER_ID, today)

    assert isinstance(outcome.result, ReviewPlan)
    assert outcome.result.sections == (SectionRef(1),)
    assert outcome.result.total_pages == 19
    saved = store.get_user(USER_ID)
    assert saved.last_section_used == 1
    assert saved.cached_plan_date == today


def test_second_request_same_day_reuses_plan(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=25))
    first = ProgressService.compute_today_plan(store, USER_ID, today)
    second = ProgressService.compute_today_plan(store, USER_ID, today)

    assert first.recomputed
    assert not second.recomputed
    assert isinstance(second.result, PlanAlreadyIssued)
    assert store.get_user(USER_ID).last_section_used == 1


def test_plan_is_recomputed_on_the_next_day(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=60))
    ProgressService.compute_today_plan(store, USER_ID, today)
    outcome = ProgressService.compute_today_plan(store, USER_ID, today + datetime.timedelta(days=1))
    assert outcome.recomputed
    assert outcome.result.sections == (SectionRef(2),)


def test_mutation_invalidates_todays_plan(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=25))
    ProgressService.compute_today_plan(store, USER_ID, today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)

    assert store.get_user(USER_ID).cached_plan_date is None
    assert ProgressService.compute_today_plan(store, USER_ID, today).recomputed


def test_full_progress_with_exhausted_priority_list(store, today):
    store.save_user(UserProgress(
        user_id=USER_ID,
        pages_memorized=604,
        priority_list=(5, 12),
        last_section_used=12,
        sections_per_day=2,
    ))
    outcome = ProgressService.compute_today_plan(store, USER_ID, today)
    assert outcome.result.sections == (SectionRef(1), SectionRef(2))
    assert outcome.result.total_pages == 39
    assert store.get_user(USER_ID).last_section_used == 2


def test_plan_records_daily_snapshot(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=45, sections_per_day=2))
    ProgressService.compute_today_plan(store, USER_ID, today)
    stat = store.get_stat(USER_ID, today)
    assert stat.pages_memorized == 45
    assert stat.pages_repeated == 40


def test_add_page_is_logged_for_undo(store, today):
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)
    assert outcome.user.pages_memorized == 1
    assert outcome.previous.pages_memorized == 0
    assert outcome.undoable
    action = store.last_action(USER_ID)
    assert (action.previous_value, action.new_value) == (0, 1)


def test_add_page_beyond_last_page_is_rejected(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=604))
    with pytest.raises(InvalidInput):
        ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)
    assert store.last_action(USER_ID) is None


@pytest.mark.parametrize("mutation, field", [
    (Mutation.set_pages(605), "pages_memorized"),
    (Mutation.set_pages(-1), "pages_memorized"),
    (Mutation.set_sections_per_day(0), "sections_per_day"),
    (Mutation.set_sections_per_day(6), "sections_per_day"),
    (Mutation.add_priority([0]), "sections"),
    (Mutation.add_priority([5, 31]), "sections"),
    (Mutation.remove_priority([]), "sections"),
])
def test_invalid_mutations_touch_nothing(store, today, mutation, field):
    with pytest.raises(InvalidInput) as exc_info:
        ProgressService.apply_mutation(store, USER_ID, mutation, today)
    assert exc_info.value.field == field
    assert store.get_user(USER_ID) == UserProgress(user_id=USER_ID)
    assert store.last_action(USER_ID) is None


def test_unchanged_value_is_not_logged(store, today):
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.set_sections_per_day(1), today)
    assert not outcome.changed
    assert store.last_action(USER_ID) is None


def test_priority_sections_are_kept_sorted_and_unique(store, today):
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_priority([15, 5, 15]), today)
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.add_priority([10]), today)
    assert outcome.user.priority_list == (5, 10, 15)
    assert store.get_user(USER_ID).priority_list == (5, 10, 15)


def test_failed_save_withdraws_logged_action(store, today, monkeypatch):
    def broken_save(user):
        raise StoreUnavailable("save_user_progress")

    monkeypatch.setattr(store, "save_user", broken_save)
    with pytest.raises(StoreUnavailable):
        ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)
    assert store.last_action(USER_ID) is None
    assert store.get_user(USER_ID).pages_memorized == 0


def test_action_log_failure_does_not_block_mutation(store, today, monkeypatch):
    def broken_append(user_id, action):
        raise StoreUnavailable("add_action")

    monkeypatch.setattr(store, "append_action", broken_append)
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.set_pages(40), today)
    assert not outcome.undoable
    assert store.get_user(USER_ID).pages_memorized == 40


def test_stats_failure_is_reported_not_raised(store, today, monkeypatch):
    def broken_upsert(user_id, stat):
        raise StoreUnavailable("upsert_daily_stat")

    monkeypatch.setattr(store, "upsert_stat", broken_upsert)
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)
    assert not outcome.stats_recorded
    assert outcome.undoable

    plan = ProgressService.compute_today_plan(store, USER_ID, today)
    assert not plan.stats_recorded
    assert plan.recomputed


def test_reset_plan_clears_cache_without_history(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=25))
    ProgressService.compute_today_plan(store, USER_ID, today)
    ProgressService.reset_plan(store, USER_ID)
    assert store.get_user(USER_ID).cached_plan_date is None
    assert store.last_action(USER_ID) is None


def test_remember_plan_handle_returns_previous(store):
    assert ProgressService.remember_plan_handle(store, USER_ID, 101) is None
    assert ProgressService.remember_plan_handle(store, USER_ID, 202) == 101
    assert store.get_user(USER_ID).cached_plan_handle == 202


def test_plan_stays_cached_after_progress_made_today(store, today):
    yesterday = today - datetime.timedelta(days=1)
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=100))
    ProgressService.compute_today_plan(store, USER_ID, yesterday)
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_page(), today)

    first = ProgressService.compute_today_plan(store, USER_ID, today)
    cursor = store.get_user(USER_ID).last_section_used
    repeats = [ProgressService.compute_today_plan(store, USER_ID, today) for _ in range(3)]

    assert first.recomputed
    assert [outcome.recomputed for outcome in repeats] == [False, False, False]
    assert all(isinstance(outcome.result, PlanAlreadyIssued) for outcome in repeats)
    assert store.get_user(USER_ID).last_section_used == cursor


def test_sections_per_day_change_refreshes_todays_snapshot(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=45))
    ProgressService.compute_today_plan(store, USER_ID, today)
    outcome = ProgressService.apply_mutation(store, USER_ID, Mutation.set_sections_per_day(3), today)

    assert outcome.stats_recorded
    stat = store.get_stat(USER_ID, today)
    assert stat.sections_per_day == 3
    assert stat.pages_repeated == 60


def test_priority_change_leaves_snapshot_alone(store, today):
    store.save_user(UserProgress(user_id=USER_ID, pages_memorized=45))
    ProgressService.compute_today_plan(store, USER_ID, today)
    ProgressService.apply_mutation(store, USER_ID, Mutation.add_priority([9]), today)
    assert store.get_stat(USER_ID, today).total_section_count == 2
