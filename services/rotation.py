"""Round-robin over memorized sections followed by the priority sections."""
from core.models import SectionRef
from services.section_map import base_section_count


def _first_priority(priority_list) -> SectionRef | None:
    if priority_list:
        return SectionRef(priority_list[0], is_priority=True)
    return None


def _after_priority_exhausted(base_count: int, priority_list) -> SectionRef | None:
    if base_count > 0:
        return SectionRef(1, is_priority=False)
    return _first_priority(priority_list)


def next_section(
    current: int,
    current_is_priority: bool,
    pages_memorized: int,
    priority_list,
) -> SectionRef | None:
    """
    Section that follows ``current`` in the review cycle, or None when there
    is nothing at all to review.
    """
    priority_list = tuple(priority_list or ())
    base_count = base_section_count(pages_memorized)

    if current_is_priority:
        # A cursor missing from the list counts as past its end.
        if current in priority_list:
            index = priority_list.index(current)
            if index < len(priority_list) - 1:
                return SectionRef(priority_list[index + 1], is_priority=True)
        return _after_priority_exhausted(base_count, priority_list)

    if current < base_count:
        return SectionRef(current + 1, is_priority=False)

    first = _first_priority(priority_list)
    if first is not None:
        return first
    return SectionRef(1, is_priority=False) if base_count > 0 else None


def cursor_is_priority(last_section_used: int, pages_memorized: int, priority_list) -> bool:
    """
    Whether the stored cursor should resume inside the priority list.

    A cursor that is neither a priority section nor a reachable base section
    (for example after the list was edited or the page count lowered) resumes
    as an exhausted priority cursor.
    """
    if last_section_used in (priority_list or ()):
        return True
    return last_section_used > base_section_count(pages_memorized)


def today_sections(
    last_section_used: int,
    pages_memorized: int,
    priority_list,
    sections_per_day: int,
) -> tuple[SectionRef, ...]:
    priority_list = tuple(priority_list or ())
    picked: list[SectionRef] = []
    current = SectionRef(
        last_section_used,
        cursor_is_priority(last_section_used, pages_memorized, priority_list),
    )
    for _ in range(max(0, sections_per_day)):
        following = next_section(current.number, current.is_priority, pages_memorized, priority_list)
        if following is None:
            break
        picked.append(following)
        current = following
    return tuple(picked)
