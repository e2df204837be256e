from core.models import SectionRef
from services.rotation import cursor_is_priority, next_section, today_sections


def test_base_cursor_advances_within_base_sections():
    # 100 pages -> 4 base sections
    assert next_section(2, False, 100, ()) == SectionRef(3)


def test_last_base_section_moves_to_first_priority():
    assert next_section(4, False, 100, (10, 20)) == SectionRef(10, is_priority=True)


def test_last_base_section_wraps_without_priority():
    assert next_section(4, False, 100, ()) == SectionRef(1)


def test_priority_cursor_advances_then_returns_to_base():
    assert next_section(10, True, 100, (10, 20)) == SectionRef(20, is_priority=True)
    assert next_section(20, True, 100, (10, 20)) == SectionRef(1)


def test_priority_only_rotation_wraps_inside_list():
    assert next_section(0, False, 0, (3, 7)) == SectionRef(3, is_priority=True)
    assert next_section(7, True, 0, (3, 7)) == SectionRef(3, is_priority=True)


def test_nothing_to_review_returns_none():
    assert next_section(0, False, 0, ()) is None
    assert today_sections(0, 0, (), 3) == ()


def test_stale_cursor_is_treated_as_exhausted_priority():
    assert cursor_is_priority(15, 100, ())
    assert today_sections(15, 100, (), 1) == (SectionRef(1),)


def test_cursor_in_priority_list_counts_as_priority():
    assert cursor_is_priority(12, 604, (5, 12))
    assert not cursor_is_priority(3, 100, (10,))


def test_fresh_user_with_some_pages_starts_at_section_one():
    assert today_sections(0, 25, (), 1) == (SectionRef(1),)


def test_exhausted_priority_list_wraps_to_base_section_one():
    assert today_sections(12, 604, (5, 12), 2) == (SectionRef(1), SectionRef(2))


def test_rotation_visits_every_reachable_section():
    priority = (10, 20)
    expected = {SectionRef(n) for n in range(1, 5)} | {SectionRef(n, is_priority=True) for n in priority}
    seen = set()
    current = SectionRef(0)
    for _ in range(2 * len(expected)):
        current = next_section(current.number, current.is_priority, 100, priority)
        assert current is not None
        seen.add(current)
    assert seen == expected


def test_today_sections_is_bounded_by_sections_per_day():
    picked = today_sections(0, 604, (), 5)
    assert [ref.number for ref in picked] == [1, 2, 3, 4, 5]
