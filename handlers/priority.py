from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import Message
import re

from core import texts
from core.errors import InvalidInput, StoreUnavailable
from core.models import Mutation
from database.store import SqlStore
from keyboards.builders import get_input_keyboard, get_priority_keyboard
from services.progress_service import ProgressService
from utils.clock import local_today

router = Router()
store = SqlStore()

_SEPARATORS_RE = re.compile(r"[\s,;]+")


class PriorityState(StatesGroup):
    waiting_for_add = State()
    waiting_for_remove = State()


def _parse_section_numbers(text: str | None) -> list[int] | None:
    """
    "5, 10 15" -> [5, 10, 15]. Returns None when any token is not a number;
    range checks are left to the service.
    """
    tokens = [t for t in _SEPARATORS_RE.split((text or "").strip()) if t]
    if not tokens or not all(t.isdigit() for t in tokens):
        return None
    return [int(t) for t in tokens]


def _current_line(priority_list) -> str:
    if not priority_list:
        return texts.PRIORITY_NONE_TEXT
    return texts.PRIORITY_CURRENT_TEXT.format(sections=texts.join_sections(priority_list))


@router.message(F.text == texts.BTN_PRIORITY)
async def priority_menu(message: Message, state: FSMContext):
    await state.clear()
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_priority_keyboard())
        return
    await message.answer(
        texts.PRIORITY_MENU_TEXT.format(current=_current_line(user.priority_list)),
        reply_markup=get_priority_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_PRIORITY_ADD)
async def ask_add(message: Message, state: FSMContext):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_priority_keyboard())
        return
    await state.set_state(PriorityState.waiting_for_add)
    await message.answer(
        texts.ASK_PRIORITY_ADD_TEXT.format(current=_current_line(user.priority_list)),
        reply_markup=get_input_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_PRIORITY_REMOVE)
async def ask_remove(message: Message, state: FSMContext):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_priority_keyboard())
        return
    if not user.priority_list:
        await message.answer(texts.PRIORITY_EMPTY_TEXT, reply_markup=get_priority_keyboard(), parse_mode="Markdown")
        return
    await state.set_state(PriorityState.waiting_for_remove)
    await message.answer(
        texts.ASK_PRIORITY_REMOVE_TEXT.format(sections=texts.join_sections(user.priority_list)),
        reply_markup=get_input_keyboard(),
        parse_mode="Markdown",
    )


async def _apply_priority_change(message: Message, state: FSMContext, mutation: Mutation, done_text: str, noop_text: str):
    try:
        outcome = ProgressService.apply_mutation(store, message.from_user.id, mutation, local_today())
    except InvalidInput:
        await message.answer(texts.PRIORITY_INVALID_TEXT, reply_markup=get_input_keyboard(), parse_mode="Markdown")
        return
    except StoreUnavailable:
        await state.clear()
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_priority_keyboard())
        return

    await state.clear()
    if not outcome.changed:
        await message.answer(noop_text, reply_markup=get_priority_keyboard(), parse_mode="Markdown")
        return
    text = done_text.format(sections=texts.join_sections(outcome.user.priority_list))
    text += texts.UNDO_HINT_TEXT if outcome.undoable else texts.NOT_UNDOABLE_TEXT
    await message.answer(text, reply_markup=get_priority_keyboard(), parse_mode="Markdown")


@router.message(PriorityState.waiting_for_add)
async def add_sections(message: Message, state: FSMContext):
    if not message.from_user:
        return
    numbers = _parse_section_numbers(message.text)
    if numbers is None:
        await message.answer(texts.PRIORITY_INVALID_TEXT, reply_markup=get_input_keyboard(), parse_mode="Markdown")
        return
    await _apply_priority_change(
        message, state, Mutation.add_priority(numbers), texts.PRIORITY_ADDED_TEXT, texts.PRIORITY_ALREADY_TEXT
    )


@router.message(PriorityState.waiting_for_remove)
async def remove_sections(message: Message, state: FSMContext):
    if not message.from_user:
        return
    numbers = _parse_section_numbers(message.text)
    if numbers is None:
        await message.answer(texts.PRIORITY_INVALID_TEXT, reply_markup=get_input_keyboard(), parse_mode="Markdown")
        return
    await _apply_priority_change(
        message, state, Mutation.remove_priority(numbers), texts.PRIORITY_REMOVED_TEXT, texts.PRIORITY_NOT_FOUND_TEXT
    )


@router.message(F.text == texts.BTN_PRIORITY_LIST)
async def list_sections(message: Message):
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_priority_keyboard())
        return
    if not user.priority_list:
        await message.answer(texts.PRIORITY_EMPTY_TEXT, reply_markup=get_priority_keyboard(), parse_mode="Markdown")
        return
    lines = "\n".join(f"• Джуз {number}" for number in user.priority_list)
    await message.answer(
        texts.PRIORITY_LIST_TEXT.format(lines=lines, count=len(user.priority_list)),
        reply_markup=get_priority_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_PRIORITY_CLEAR)
async def clear_sections(message: Message, state: FSMContext):
    if not message.from_user:
        return
    await _apply_priority_change(
        message, state, Mutation.clear_priority(), texts.PRIORITY_CLEARED_TEXT, texts.PRIORITY_EMPTY_TEXT
    )
