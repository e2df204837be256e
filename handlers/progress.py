from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import Message

from core import texts
from core.errors import InvalidInput, StoreUnavailable
from core.models import SECTION_COUNT, TOTAL_PAGES, Mutation, MutationOutcome
from database.store import SqlStore
from keyboards.builders import (
    get_input_keyboard,
    get_main_menu_keyboard,
    get_pages_keyboard,
    get_sections_per_day_keyboard,
    get_settings_keyboard,
)
from services.plan_builder import daily_page_budget
from services.progress_service import ProgressService
from services.section_map import current_section_progress
from utils.clock import local_today
from utils.ui_utils import progress_fields

router = Router()
store = SqlStore()


class ProgressState(StatesGroup):
    waiting_for_pages = State()
    waiting_for_sections_per_day = State()


def completion_text(pages_memorized: int) -> str:
    """Congratulation prefix when the last added page closed a section."""
    if pages_memorized >= TOTAL_PAGES:
        return texts.QURAN_COMPLETED_TEXT
    section, done, size = current_section_progress(pages_memorized)
    if done == size:
        return texts.SECTION_COMPLETED_TEXT.format(number=section)
    return ""


def _outcome_suffix(outcome: MutationOutcome) -> str:
    suffix = texts.PLAN_WILL_UPDATE_TEXT
    suffix += texts.UNDO_HINT_TEXT if outcome.undoable else texts.NOT_UNDOABLE_TEXT
    return suffix


@router.message(F.text == texts.BTN_ADD_PAGE)
async def add_page(message: Message):
    if not message.from_user:
        return
    try:
        outcome = ProgressService.apply_mutation(store, message.from_user.id, Mutation.add_page(), local_today())
    except InvalidInput:
        await message.answer(
            texts.ALL_PAGES_DONE_TEXT.format(total=TOTAL_PAGES),
            reply_markup=get_main_menu_keyboard(),
            parse_mode="Markdown",
        )
        return
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_main_menu_keyboard())
        return

    fields = progress_fields(outcome.user)
    text = completion_text(outcome.user.pages_memorized) + texts.PAGE_ADDED_TEXT.format(**fields)
    if fields["done"] == fields["size"] and fields["section"] < SECTION_COUNT:
        text += texts.NEXT_SECTION_TEXT.format(number=fields["section"] + 1)
    text += _outcome_suffix(outcome)
    await message.answer(text, reply_markup=get_main_menu_keyboard(), parse_mode="Markdown")


@router.message(F.text == texts.BTN_MY_PAGES)
async def pages_menu(message: Message):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_settings_keyboard())
        return
    await message.answer(
        texts.PAGES_MENU_TEXT.format(**progress_fields(user)),
        reply_markup=get_pages_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_CURRENT_PROGRESS)
async def current_progress(message: Message):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_pages_keyboard())
        return
    priority_line = texts.PRIORITY_CURRENT_TEXT.format(sections=texts.join_sections(user.priority_list)) if user.priority_list else ""
    await message.answer(
        texts.CURRENT_PROGRESS_TEXT.format(priority_line=priority_line, **progress_fields(user)),
        reply_markup=get_pages_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_SET_PAGES)
async def ask_pages(message: Message, state: FSMContext):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_pages_keyboard())
        return
    await state.set_state(ProgressState.waiting_for_pages)
    await message.answer(
        texts.ASK_PAGES_TEXT.format(pages=user.pages_memorized, total=TOTAL_PAGES),
        reply_markup=get_input_keyboard(),
        parse_mode="Markdown",
    )


@router.message(ProgressState.waiting_for_pages)
async def set_pages(message: Message, state: FSMContext):
    if not message.from_user:
        return
    raw = (message.text or "").strip()
    if not raw.isdigit():
        await message.answer(texts.PAGES_INVALID_TEXT.format(total=TOTAL_PAGES), reply_markup=get_input_keyboard())
        return
    try:
        outcome = ProgressService.apply_mutation(
            store, message.from_user.id, Mutation.set_pages(int(raw)), local_today()
        )
    except InvalidInput:
        await message.answer(texts.PAGES_INVALID_TEXT.format(total=TOTAL_PAGES), reply_markup=get_input_keyboard())
        return
    except StoreUnavailable:
        await state.clear()
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_pages_keyboard())
        return

    await state.clear()
    if not outcome.changed:
        await message.answer(texts.NOTHING_CHANGED_TEXT, reply_markup=get_pages_keyboard())
        return
    await message.answer(
        texts.PAGES_UPDATED_TEXT.format(pages=outcome.user.pages_memorized) + _outcome_suffix(outcome),
        reply_markup=get_pages_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_SECTIONS_PER_DAY)
async def ask_sections_per_day(message: Message, state: FSMContext):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_settings_keyboard())
        return
    await state.set_state(ProgressState.waiting_for_sections_per_day)
    await message.answer(
        texts.SECTIONS_PER_DAY_TEXT.format(
            per_day=user.sections_per_day,
            pages=daily_page_budget(user.sections_per_day),
        ),
        reply_markup=get_sections_per_day_keyboard(),
        parse_mode="Markdown",
    )


@router.message(ProgressState.waiting_for_sections_per_day, F.text.in_(texts.SECTIONS_PER_DAY_CHOICES))
async def set_sections_per_day(message: Message, state: FSMContext):
    if not message.from_user:
        return
    await state.clear()
    try:
        outcome = ProgressService.apply_mutation(
            store, message.from_user.id, Mutation.set_sections_per_day(int(message.text)), local_today()
        )
    except InvalidInput:
        await message.answer(texts.GENERIC_ERROR_TEXT, reply_markup=get_settings_keyboard())
        return
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_settings_keyboard())
        return
    if not outcome.changed:
        await message.answer(texts.NOTHING_CHANGED_TEXT, reply_markup=get_settings_keyboard())
        return
    per_day = outcome.user.sections_per_day
    await message.answer(
        texts.SECTIONS_PER_DAY_UPDATED_TEXT.format(per_day=per_day, pages=daily_page_budget(per_day))
        + _outcome_suffix(outcome),
        reply_markup=get_settings_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_RESET_PLAN)
async def reset_plan(message: Message):
    if not message.from_user:
        return
    try:
        ProgressService.reset_plan(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_settings_keyboard())
        return
    await message.answer(texts.RESET_PLAN_TEXT, reply_markup=get_main_menu_keyboard(), parse_mode="Markdown")
