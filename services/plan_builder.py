import math

from core.models import PAGES_PER_SECTION, NothingToReview, PlanSlot, ReviewPlan, SectionRef
from services.section_map import section_pages

# Canonical keys of the five daily prayers; display names live in core.texts.
PRAYER_SLOTS = ("fajr", "dhuhr", "asr", "maghrib", "isha")


def daily_page_budget(sections_per_day: int) -> int:
    return PAGES_PER_SECTION * sections_per_day


def split_into_slots(pages: list[int], slot_labels=PRAYER_SLOTS) -> tuple[PlanSlot, ...]:
    """
    Cuts ``pages`` into consecutive buckets of ceil(n / len(slots)).
    Trailing slots that would start past the end are dropped.
    """
    total = len(pages)
    if total == 0:
        return ()
    bucket = math.ceil(total / len(slot_labels))
    slots = []
    for i, label in enumerate(slot_labels):
        start = i * bucket
        if start >= total:
            break
        chunk = pages[start:start + bucket]
        slots.append(PlanSlot(label=label, from_page=chunk[0], to_page=chunk[-1], page_count=len(chunk)))
    return tuple(slots)


def build_plan(
    sections: tuple[SectionRef, ...],
    pages_memorized: int,
    sections_per_day: int,
) -> ReviewPlan | NothingToReview:
    if not sections:
        return NothingToReview(reason="no_sections")

    pages: list[int] = []
    for ref in sections:
        pages.extend(section_pages(ref.number, pages_memorized, ref.is_priority))
    pages = pages[:daily_page_budget(sections_per_day)]

    if not pages:
        return NothingToReview(reason="no_pages")
    return ReviewPlan(sections=tuple(sections), slots=split_into_slots(pages), total_pages=len(pages))
