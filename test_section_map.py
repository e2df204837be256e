from core.models import TOTAL_PAGES
from services.section_map import (
    base_section_count,
    current_section_progress,
    is_fully_memorized,
    page_range,
    section_pages,
    total_section_count,
)


def test_current_section_progress_never_exceeds_section_size():
    for pages in range(0, TOTAL_PAGES + 1):
        section, done, size = current_section_progress(pages)
        assert 0 <= done <= size
        if section == 1:
            assert size == 19
        elif section == 30:
            assert size == 24
        else:
            assert size == 20


def test_current_section_progress_boundaries():
    assert current_section_progress(0) == (1, 0, 19)
    assert current_section_progress(1) == (1, 0, 19)
    assert current_section_progress(20) == (1, 19, 19)
    assert current_section_progress(21) == (2, 1, 20)
    assert current_section_progress(40) == (2, 20, 20)
    assert current_section_progress(580) == (29, 20, 20)
    assert current_section_progress(581) == (30, 1, 24)
    assert current_section_progress(604) == (30, 24, 24)


def test_base_section_count_fixed_points():
    assert base_section_count(0) == 0
    assert base_section_count(1) == 1
    assert base_section_count(20) == 1
    assert base_section_count(25) == 1
    assert base_section_count(41) == 2
    assert base_section_count(603) == 30
    assert base_section_count(604) == 30


def test_base_section_count_is_monotonic():
    counts = [base_section_count(p) for p in range(0, TOTAL_PAGES + 1)]
    assert counts == sorted(counts)
    assert all(0 <= c <= 30 for c in counts)


def test_total_section_count_adds_priority_sections():
    assert total_section_count(41, (10, 12)) == 4
    assert total_section_count(0, ()) == 0


def test_page_range_first_section_skips_page_one():
    assert page_range(1, 10) == (2, 10)
    assert page_range(1, 300) == (2, 20)
    assert page_range(1, 0, is_priority=True) == (2, 20)


def test_page_range_clips_base_sections_to_progress():
    assert page_range(3, 45) == (41, 45)
    assert page_range(3, 45, is_priority=True) == (41, 60)
    assert page_range(30, 590) == (581, 590)
    assert page_range(30, 0, is_priority=True) == (581, 604)


def test_unreached_base_section_has_no_pages():
    start, end = page_range(5, 30)
    assert start > end
    assert section_pages(5, 30) == []


def test_is_fully_memorized():
    assert is_fully_memorized(1, 20)
    assert not is_fully_memorized(1, 19)
    assert is_fully_memorized(2, 40)
    assert not is_fully_memorized(2, 39)
    assert not is_fully_memorized(30, 603)
    assert is_fully_memorized(30, 604)
    assert is_fully_memorized(17, 0, is_priority=True)
