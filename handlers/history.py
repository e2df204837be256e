from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message
import logging

from core import texts
from core.config import settings
from core.errors import InvalidInput, NoActionToUndo, StoreUnavailable
from database.store import SqlStore
from keyboards.builders import get_history_keyboard, get_main_menu_keyboard
from services.action_log import ActionLog
from utils.clock import local_today

router = Router()
store = SqlStore()


def _fmt_when(created_at) -> str:
    if not created_at:
        return "-"
    return created_at.strftime("%d.%m %H:%M")


@router.message(Command("undo"))
@router.message(F.text == texts.BTN_UNDO)
async def undo_last(message: Message):
    if not message.from_user:
        return
    try:
        outcome = ActionLog.undo_last(store, message.from_user.id, local_today())
    except NoActionToUndo:
        await message.answer(texts.NO_ACTION_TO_UNDO_TEXT, reply_markup=get_main_menu_keyboard(), parse_mode="Markdown")
        return
    except InvalidInput as exc:
        logging.error(f"Corrupt history entry for user {message.from_user.id}: {exc}")
        await message.answer(texts.UNDO_FAILED_TEXT, reply_markup=get_main_menu_keyboard(), parse_mode="Markdown")
        return
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_main_menu_keyboard())
        return

    await message.answer(
        texts.UNDO_DONE_TEXT.format(description=ActionLog.describe(outcome.action)) + texts.PLAN_WILL_UPDATE_TEXT,
        reply_markup=get_main_menu_keyboard(),
        parse_mode="Markdown",
    )


@router.message(F.text == texts.BTN_HISTORY)
async def show_history(message: Message):
    if not message.from_user:
        return
    try:
        actions = ActionLog.history(store, message.from_user.id, settings.history_limit)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_history_keyboard())
        return
    if not actions:
        await message.answer(texts.HISTORY_EMPTY_TEXT, reply_markup=get_history_keyboard(), parse_mode="Markdown")
        return

    text = texts.HISTORY_HEADER_TEXT
    for index, action in enumerate(actions, start=1):
        text += texts.HISTORY_LINE.format(
            index=index,
            description=ActionLog.describe(action),
            when=_fmt_when(action.created_at),
        )
    text += texts.HISTORY_FOOTER_TEXT
    await message.answer(text, reply_markup=get_history_keyboard(), parse_mode="Markdown")
