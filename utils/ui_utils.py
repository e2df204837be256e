from core import texts
from core.models import SECTION_COUNT, TOTAL_PAGES, ReviewPlan, UserProgress
from services.section_map import base_section_count, current_section_progress, total_section_count


def _get_progress_bar(current: int, total: int, length: int = 10) -> str:
    if total <= 0:
        return "░" * length
    filled = min(length, int(length * current / total))
    percent = round(100 * current / total)
    return "█" * filled + "░" * (length - filled) + f" {percent}%"


def progress_fields(user: UserProgress) -> dict:
    """Format fields shared by the progress, stats and plan screens."""
    section, done, size = current_section_progress(user.pages_memorized)
    return {
        "pages": user.pages_memorized,
        "total": TOTAL_PAGES,
        "known_sections": min(SECTION_COUNT, total_section_count(user.pages_memorized, user.priority_list)),
        "base_sections": base_section_count(user.pages_memorized),
        "priority_count": len(user.priority_list),
        "per_day": user.sections_per_day,
        "section": section,
        "done": done,
        "size": size,
    }


def render_plan(plan: ReviewPlan, user: UserProgress) -> str:
    section_labels = []
    for ref in plan.sections:
        if ref.is_priority:
            section_labels.append(texts.PLAN_SECTION_PRIORITY.format(number=ref.number))
        else:
            section_labels.append(str(ref.number))
    slot_lines = [
        texts.PLAN_SLOT_LINE.format(
            name=texts.SLOT_NAMES.get(slot.label, slot.label),
            start=slot.from_page,
            end=slot.to_page,
        )
        for slot in plan.slots
    ]
    return texts.PLAN_TEXT.format(
        sections=", ".join(section_labels),
        total_pages=plan.total_pages,
        slots="\n".join(slot_lines),
        **progress_fields(user),
    )
