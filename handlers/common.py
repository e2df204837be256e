from aiogram import Router, F
from aiogram.filters import CommandStart, Command
from aiogram.types import Message
from aiogram.fsm.context import FSMContext
import logging

from core import texts
from core.errors import StoreUnavailable
from database.store import SqlStore
from keyboards.builders import (
    get_main_menu_keyboard,
    get_more_keyboard,
    get_settings_keyboard,
    get_stats_keyboard,
)
from services.progress_service import ProgressService

router = Router()
store = SqlStore()


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    await state.clear()
    if not message.from_user:
        return
    try:
        # First contact creates the progress row.
        ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable as exc:
        logging.error(f"Could not register user {message.from_user.id}: {exc}")
    await message.answer(
        texts.START_TEXT.format(name=message.from_user.first_name or ""),
        reply_markup=get_main_menu_keyboard(),
        parse_mode="Markdown",
    )


@router.message(Command("menu"))
@router.message(F.text == texts.BTN_HOME)
async def cmd_menu(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(texts.MAIN_MENU_TEXT, reply_markup=get_main_menu_keyboard())


@router.message(F.text == texts.BTN_MORE)
async def more_menu(message: Message):
    await message.answer(texts.MORE_MENU_TEXT, reply_markup=get_more_keyboard(), parse_mode="Markdown")


@router.message(Command("stats"))
@router.message(F.text == texts.BTN_STATS_MENU)
async def stats_menu(message: Message):
    await message.answer(texts.STATS_MENU_TEXT, reply_markup=get_stats_keyboard(), parse_mode="Markdown")


@router.message(Command("settings"))
@router.message(F.text == texts.BTN_SETTINGS)
@router.message(F.text == texts.BTN_BACK_SETTINGS)
async def settings_menu(message: Message, state: FSMContext):
    await state.clear()
    if not message.from_user:
        return
    try:
        user = ProgressService.get_progress(store, message.from_user.id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_main_menu_keyboard())
        return
    await message.answer(
        texts.SETTINGS_TEXT.format(
            pages=user.pages_memorized,
            per_day=user.sections_per_day,
            priority_count=len(user.priority_list),
        ),
        reply_markup=get_settings_keyboard(),
        parse_mode="Markdown",
    )
