"""Page/section arithmetic for the 604-page mushaf split into 30 juz.

Page 1 (al-Fatiha) is not counted, so juz 1 effectively covers pages 2-20.
Juz 30 runs from page 581 to the last page.
"""
from core.models import PAGES_PER_SECTION, SECTION_COUNT, TOTAL_PAGES

FIRST_COUNTED_PAGE = 2
LAST_SECTION_START = (SECTION_COUNT - 1) * PAGES_PER_SECTION + 1


def section_bounds(section: int) -> tuple[int, int]:
    """Nominal (first_page, last_page) of a section, ignoring progress."""
    if section == 1:
        return FIRST_COUNTED_PAGE, PAGES_PER_SECTION
    if section == SECTION_COUNT:
        return LAST_SECTION_START, TOTAL_PAGES
    return (section - 1) * PAGES_PER_SECTION + 1, section * PAGES_PER_SECTION


def page_range(section: int, pages_memorized: int, is_priority: bool = False) -> tuple[int, int]:
    """
    Pages of ``section`` due for review.

    Priority sections are reviewed in full; base sections stop at the last
    memorized page. ``start > end`` means the section has nothing to offer yet.
    """
    start, end = section_bounds(section)
    if not is_priority:
        end = min(end, pages_memorized)
    return start, end


def section_pages(section: int, pages_memorized: int, is_priority: bool = False) -> list[int]:
    start, end = page_range(section, pages_memorized, is_priority)
    return list(range(start, end + 1))


def is_fully_memorized(section: int, pages_memorized: int, is_priority: bool = False) -> bool:
    if is_priority:
        return True
    if section == 1:
        return pages_memorized >= PAGES_PER_SECTION
    if section == SECTION_COUNT:
        return pages_memorized >= TOTAL_PAGES
    return pages_memorized >= section * PAGES_PER_SECTION


def base_section_count(pages_memorized: int) -> int:
    """Sections reachable by cumulative progress alone."""
    if pages_memorized <= 0:
        return 0
    if pages_memorized >= TOTAL_PAGES:
        return SECTION_COUNT
    if pages_memorized <= PAGES_PER_SECTION:
        return 1
    return (pages_memorized - 1) // PAGES_PER_SECTION


def total_section_count(pages_memorized: int, priority_list) -> int:
    return base_section_count(pages_memorized) + len(priority_list or ())


def current_section_progress(pages_memorized: int) -> tuple[int, int, int]:
    """
    (section, pages_done_in_section, section_size) for the section holding the
    last memorized page. Juz 1 has 19 counted pages and juz 30 has 24.
    """
    pages = max(0, min(pages_memorized, TOTAL_PAGES))
    if pages <= PAGES_PER_SECTION:
        first, last = section_bounds(1)
        return 1, max(0, pages - first + 1), last - first + 1

    if pages >= LAST_SECTION_START:
        section = SECTION_COUNT
    else:
        section = (pages - 1) // PAGES_PER_SECTION + 1
    first, last = section_bounds(section)
    return section, pages - first + 1, last - first + 1
