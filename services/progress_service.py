import dataclasses
import datetime
import logging

from core.errors import InvalidInput, StoreUnavailable
from core.models import (
    MAX_SECTIONS_PER_DAY,
    MIN_SECTIONS_PER_DAY,
    SECTION_COUNT,
    TOTAL_PAGES,
    ActionRecord,
    ActionType,
    Mutation,
    MutationOutcome,
    PlanAlreadyIssued,
    TodayPlanOutcome,
    UserProgress,
    normalize_sections,
)
from services.action_log import ActionLog
from services.freshness import needs_recompute
from services.plan_builder import build_plan
from services.rotation import today_sections
from services.stats_service import StatsService
from utils.ops_logging import log_structured


def _validate_sections(sections) -> tuple[int, ...]:
    if not sections:
        raise InvalidInput("sections", "No section numbers given")
    bad = [s for s in sections if not 1 <= int(s) <= SECTION_COUNT]
    if bad:
        raise InvalidInput("sections", f"Section numbers must be within 1..{SECTION_COUNT}: {bad}")
    return normalize_sections(sections)


def _apply(user: UserProgress, mutation: Mutation) -> tuple[UserProgress, ActionRecord | None]:
    """
    Validates ``mutation`` against ``user`` and returns the new record plus the
    action describing it. A mutation that changes nothing returns (user, None).
    """
    kind = mutation.action_type
    if kind == ActionType.ADD_PAGE:
        if user.pages_memorized >= TOTAL_PAGES:
            raise InvalidInput("pages_memorized", f"All {TOTAL_PAGES} pages are already memorized")
        new_pages = user.pages_memorized + 1
        return (
            dataclasses.replace(user, pages_memorized=new_pages),
            ActionRecord(kind, previous_value=user.pages_memorized, new_value=new_pages),
        )

    if kind == ActionType.SET_PAGE_COUNT_MANUAL:
        if mutation.value is None or not 0 <= mutation.value <= TOTAL_PAGES:
            raise InvalidInput("pages_memorized", f"Page count must be within 0..{TOTAL_PAGES}")
        if mutation.value == user.pages_memorized:
            return user, None
        return (
            dataclasses.replace(user, pages_memorized=mutation.value),
            ActionRecord(kind, previous_value=user.pages_memorized, new_value=mutation.value),
        )

    if kind == ActionType.SET_SECTIONS_PER_DAY:
        if mutation.value is None or not MIN_SECTIONS_PER_DAY <= mutation.value <= MAX_SECTIONS_PER_DAY:
            raise InvalidInput(
                "sections_per_day",
                f"Sections per day must be within {MIN_SECTIONS_PER_DAY}..{MAX_SECTIONS_PER_DAY}",
            )
        if mutation.value == user.sections_per_day:
            return user, None
        return (
            dataclasses.replace(user, sections_per_day=mutation.value),
            ActionRecord(kind, previous_value=user.sections_per_day, new_value=mutation.value),
        )

    if kind == ActionType.ADD_PRIORITY:
        new_list = normalize_sections(user.priority_list + _validate_sections(mutation.sections))
    elif kind == ActionType.REMOVE_PRIORITY:
        removed = set(_validate_sections(mutation.sections))
        new_list = tuple(s for s in user.priority_list if s not in removed)
    elif kind == ActionType.CLEAR_PRIORITY:
        new_list = ()
    else:
        raise InvalidInput("action_type", f"Unsupported mutation {kind}")

    if new_list == user.priority_list:
        return user, None
    return (
        dataclasses.replace(user, priority_list=new_list),
        ActionRecord(kind, previous_priority_list=user.priority_list, new_priority_list=new_list),
    )


class ProgressService:
    @staticmethod
    def get_progress(store, user_id: int) -> UserProgress:
        return store.get_user(user_id)

    @staticmethod
    def apply_mutation(store, user_id: int, mutation: Mutation, today: datetime.date) -> MutationOutcome:
        """
        Logs, then persists a user-initiated change.

        The cached plan is invalidated in the same write. If that write fails
        the history entry is withdrawn and StoreUnavailable propagates.
        """
        user = store.get_user(user_id)
        updated, action = _apply(user, mutation)
        if action is None:
            return MutationOutcome(
                user=user,
                previous=user,
                action_type=mutation.action_type,
                changed=False,
                undoable=False,
            )

        updated.cached_plan_date = None
        action_id = ActionLog.record(store, user_id, action)
        try:
            store.save_user(updated)
        except StoreUnavailable:
            ActionLog.discard(store, action_id)
            raise

        stats_recorded = True
        if not mutation.action_type.touches_priority:
            stats_recorded = StatsService.try_record_snapshot(store, updated, today)

        log_structured(
            "mutation_applied",
            user_id=user_id,
            action_type=mutation.action_type.value,
            undoable=action_id is not None,
            stats_recorded=stats_recorded,
        )
        return MutationOutcome(
            user=updated,
            previous=user,
            action_type=mutation.action_type,
            undoable=action_id is not None,
            stats_recorded=stats_recorded,
        )

    @staticmethod
    def compute_today_plan(store, user_id: int, today: datetime.date) -> TodayPlanOutcome:
        user = store.get_user(user_id)
        try:
            yesterday = store.get_stat(user_id, today - datetime.timedelta(days=1))
            today_stat = store.get_stat(user_id, today)
        except StoreUnavailable as exc:
            logging.warning(f"Snapshots unavailable for user {user_id}: {exc}")
            yesterday = today_stat = None

        if not needs_recompute(user, today, yesterday, today_stat):
            log_structured("plan_reused", user_id=user_id, date=today)
            return TodayPlanOutcome(
                result=PlanAlreadyIssued(plan_date=user.cached_plan_date, handle=user.cached_plan_handle),
                user=user,
            )

        stats_recorded = StatsService.try_record_snapshot(store, user, today)
        sections = today_sections(
            user.last_section_used,
            user.pages_memorized,
            user.priority_list,
            user.sections_per_day,
        )
        result = build_plan(sections, user.pages_memorized, user.sections_per_day)

        updated = dataclasses.replace(user, cached_plan_date=today)
        if sections:
            updated.last_section_used = sections[-1].number
        store.save_user(updated)

        log_structured(
            "plan_computed",
            user_id=user_id,
            date=today,
            sections=[ref.number for ref in sections],
            total_pages=getattr(result, "total_pages", 0),
            stats_recorded=stats_recorded,
        )
        return TodayPlanOutcome(result=result, user=updated, stats_recorded=stats_recorded)

    @staticmethod
    def reset_plan(store, user_id: int) -> UserProgress:
        """Forces the next plan request to recompute; not recorded for undo."""
        user = store.get_user(user_id)
        user.cached_plan_date = None
        store.save_user(user)
        return user

    @staticmethod
    def remember_plan_handle(store, user_id: int, handle: int | None) -> int | None:
        """Stores the delivered plan's message id and returns the one it replaces."""
        user = store.get_user(user_id)
        previous = user.cached_plan_handle
        user.cached_plan_handle = handle
        store.save_user(user)
        return previous
