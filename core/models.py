"""Domain types shared by the services, the store and the handlers."""
import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

TOTAL_PAGES = 604
PAGES_PER_SECTION = 20
SECTION_COUNT = 30
MIN_SECTIONS_PER_DAY = 1
MAX_SECTIONS_PER_DAY = 5


def normalize_sections(values: Iterable[int] | None) -> tuple[int, ...]:
    """Sorted, duplicate-free tuple of section numbers."""
    if not values:
        return ()
    return tuple(sorted({int(v) for v in values}))


class ActionType(str, Enum):
    ADD_PAGE = "add_page"
    SET_PAGE_COUNT_MANUAL = "set_page_count_manual"
    SET_SECTIONS_PER_DAY = "set_sections_per_day"
    ADD_PRIORITY = "add_priority"
    REMOVE_PRIORITY = "remove_priority"
    CLEAR_PRIORITY = "clear_priority"

    @property
    def touches_pages(self) -> bool:
        return self in (ActionType.ADD_PAGE, ActionType.SET_PAGE_COUNT_MANUAL)

    @property
    def touches_priority(self) -> bool:
        return self in (
            ActionType.ADD_PRIORITY,
            ActionType.REMOVE_PRIORITY,
            ActionType.CLEAR_PRIORITY,
        )


@dataclass
class UserProgress:
    user_id: int
    pages_memorized: int = 0
    last_section_used: int = 0
    priority_list: tuple[int, ...] = ()
    sections_per_day: int = 1
    cached_plan_date: Optional[datetime.date] = None
    cached_plan_handle: Optional[int] = None

    def __post_init__(self):
        self.priority_list = normalize_sections(self.priority_list)


@dataclass(frozen=True)
class SectionRef:
    number: int
    is_priority: bool = False


@dataclass(frozen=True)
class DailyStat:
    stat_date: datetime.date
    pages_memorized: int
    base_section_count: int
    total_section_count: int
    daily_progress_pages: int
    sections_per_day: int
    pages_repeated: int


@dataclass
class ActionRecord:
    action_type: ActionType
    previous_value: Optional[int] = None
    new_value: Optional[int] = None
    previous_priority_list: Optional[tuple[int, ...]] = None
    new_priority_list: Optional[tuple[int, ...]] = None
    created_at: Optional[datetime.datetime] = None
    id: Optional[int] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class Mutation:
    action_type: ActionType
    value: Optional[int] = None
    sections: tuple[int, ...] = ()

    @classmethod
    def add_page(cls) -> "Mutation":
        return cls(ActionType.ADD_PAGE)

    @classmethod
    def set_pages(cls, pages: int) -> "Mutation":
        return cls(ActionType.SET_PAGE_COUNT_MANUAL, value=pages)

    @classmethod
    def set_sections_per_day(cls, count: int) -> "Mutation":
        return cls(ActionType.SET_SECTIONS_PER_DAY, value=count)

    @classmethod
    def add_priority(cls, sections: Iterable[int]) -> "Mutation":
        return cls(ActionType.ADD_PRIORITY, sections=tuple(sections))

    @classmethod
    def remove_priority(cls, sections: Iterable[int]) -> "Mutation":
        return cls(ActionType.REMOVE_PRIORITY, sections=tuple(sections))

    @classmethod
    def clear_priority(cls) -> "Mutation":
        return cls(ActionType.CLEAR_PRIORITY)


@dataclass(frozen=True)
class PlanSlot:
    label: str
    from_page: int
    to_page: int
    page_count: int


@dataclass(frozen=True)
class ReviewPlan:
    sections: tuple[SectionRef, ...]
    slots: tuple[PlanSlot, ...]
    total_pages: int


@dataclass(frozen=True)
class NothingToReview:
    reason: str = "no_sections"


@dataclass(frozen=True)
class PlanAlreadyIssued:
    plan_date: datetime.date
    handle: Optional[int] = None


@dataclass
class TodayPlanOutcome:
    result: ReviewPlan | NothingToReview | PlanAlreadyIssued
    user: UserProgress
    stats_recorded: bool = True

    @property
    def recomputed(self) -> bool:
        return not isinstance(self.result, PlanAlreadyIssued)


@dataclass
class MutationOutcome:
    user: UserProgress
    previous: UserProgress
    action_type: ActionType
    changed: bool = True
    undoable: bool = True
    stats_recorded: bool = True


@dataclass
class UndoOutcome:
    action: ActionRecord
    user: UserProgress
    stats_recorded: bool = True


@dataclass
class WeeklySummary:
    days: list[DailyStat] = field(default_factory=list)

    @property
    def new_pages(self) -> int:
        return sum(day.daily_progress_pages for day in self.days)

    @property
    def pages_repeated(self) -> int:
        return sum(day.pages_repeated for day in self.days)

    @property
    def average_repeated(self) -> int:
        if not self.days:
            return 0
        return round(self.pages_repeated / len(self.days))
