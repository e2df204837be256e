from core import texts
from core.models import ReviewPlan, SectionRef, UserProgress
from handlers.priority import _parse_section_numbers
from handlers.progress import completion_text
from services.plan_builder import build_plan
from utils.ui_utils import _get_progress_bar, progress_fields, render_plan


def test_parse_section_numbers_accepts_mixed_separators():
    assert _parse_section_numbers("5, 10 15") == [5, 10, 15]
    assert _parse_section_numbers(" 7 ") == [7]
    assert _parse_section_numbers("1;2,,3") == [1, 2, 3]


def test_parse_section_numbers_rejects_garbage():
    assert _parse_section_numbers("") is None
    assert _parse_section_numbers(None) is None
    assert _parse_section_numbers("5, abc") is None
    assert _parse_section_numbers("-3") is None


def test_parse_keeps_out_of_range_numbers_for_the_service():
    assert _parse_section_numbers("0 31") == [0, 31]


def test_completion_text_on_section_boundaries():
    assert completion_text(20) == texts.SECTION_COMPLETED_TEXT.format(number=1)
    assert completion_text(40) == texts.SECTION_COMPLETED_TEXT.format(number=2)
    assert completion_text(41) == ""
    assert completion_text(604) == texts.QURAN_COMPLETED_TEXT


def test_render_plan_uses_prayer_names_and_marks_priority():
    user = UserProgress(user_id=1, pages_memorized=25, priority_list=(9,), sections_per_day=2)
    plan = build_plan((SectionRef(1), SectionRef(9, is_priority=True)), 25, 2)
    assert isinstance(plan, ReviewPlan)

    text = render_plan(plan, user)
    assert "Фаджр" in text
    assert "Иша" in text
    assert texts.PLAN_SECTION_PRIORITY.format(number=9) in text
    assert f"*Страницы:* {plan.total_pages}" in text


def test_progress_fields():
    fields = progress_fields(UserProgress(user_id=1, pages_memorized=581, priority_list=(3,)))
    assert (fields["section"], fields["done"], fields["size"]) == (30, 1, 24)
    assert fields["base_sections"] == 29
    assert fields["known_sections"] == 30


def test_progress_bar():
    assert _get_progress_bar(0, 604).startswith("░" * 10)
    assert _get_progress_bar(604, 604) == "█" * 10 + " 100%"
