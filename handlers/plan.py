from aiogram import Bot, Router, F
from aiogram.filters import Command
from aiogram.types import Message
import logging

from core import texts
from core.errors import StoreUnavailable
from core.models import NothingToReview, PlanAlreadyIssued
from database.store import SqlStore
from keyboards.builders import get_main_menu_keyboard
from services.progress_service import ProgressService
from utils.clock import local_today
from utils.ui_utils import progress_fields, render_plan

router = Router()
store = SqlStore()


async def _repin_plan(bot: Bot, chat_id: int, previous_handle: int | None, new_handle: int):
    """Pinning is cosmetic; chats without pin rights still get the plan."""
    if previous_handle and previous_handle != new_handle:
        try:
            await bot.unpin_chat_message(chat_id=chat_id, message_id=previous_handle)
        except Exception as exc:
            logging.info(f"Unpin of plan {previous_handle} in {chat_id} failed: {exc}")
    try:
        await bot.pin_chat_message(chat_id=chat_id, message_id=new_handle, disable_notification=True)
    except Exception as exc:
        logging.info(f"Pin of plan {new_handle} in {chat_id} failed: {exc}")


@router.message(Command("plan"))
@router.message(F.text == texts.BTN_PLAN)
async def today_plan(message: Message):
    if not message.from_user:
        return
    user_id = message.from_user.id
    try:
        outcome = ProgressService.compute_today_plan(store, user_id, local_today())
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_main_menu_keyboard())
        return

    result = outcome.result
    if isinstance(result, PlanAlreadyIssued):
        await message.answer(texts.PLAN_ALREADY_ISSUED_TEXT, reply_markup=get_main_menu_keyboard(), parse_mode="Markdown")
        return
    if isinstance(result, NothingToReview):
        await message.answer(
            texts.NOTHING_TO_REVIEW_TEXT.format(**progress_fields(outcome.user)),
            reply_markup=get_main_menu_keyboard(),
            parse_mode="Markdown",
        )
        return

    sent = await message.answer(
        render_plan(result, outcome.user),
        reply_markup=get_main_menu_keyboard(),
        parse_mode="Markdown",
    )
    try:
        previous_handle = ProgressService.remember_plan_handle(store, user_id, sent.message_id)
    except StoreUnavailable as exc:
        logging.warning(f"Plan handle for user {user_id} not stored: {exc}")
        previous_handle = outcome.user.cached_plan_handle
    await _repin_plan(message.bot, message.chat.id, previous_handle, sent.message_id)
