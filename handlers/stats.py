from aiogram import Router, F
from aiogram.types import BufferedInputFile, Message

from core import texts
from core.errors import StoreUnavailable
from core.models import TOTAL_PAGES
from database.store import SqlStore
from keyboards.builders import get_stats_keyboard
from services.progress_service import ProgressService
from services.stats_service import StatsService
from utils.clock import local_today
from utils.ui_utils import _get_progress_bar, progress_fields

router = Router()
store = SqlStore()


@router.message(F.text == texts.BTN_MY_STATS)
async def my_stats(message: Message):
    if not message.from_user:
        return
    user_id = message.from_user.id
    try:
        user = ProgressService.get_progress(store, user_id)
        week = StatsService.weekly_summary(store, user_id, local_today())
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_stats_keyboard())
        return

    text = texts.MY_STATS_TEXT.format(
        bar=_get_progress_bar(user.pages_memorized, TOTAL_PAGES),
        **progress_fields(user),
    )
    if week.days:
        text += texts.WEEK_SUMMARY_TEXT.format(new_pages=week.new_pages, repeated=week.pages_repeated)
    await message.answer(text, reply_markup=get_stats_keyboard(), parse_mode="Markdown")


@router.message(F.text == texts.BTN_WEEKLY)
async def weekly_stats(message: Message):
    if not message.from_user:
        return
    try:
        week = StatsService.weekly_summary(store, message.from_user.id, local_today())
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_stats_keyboard())
        return
    if not week.days:
        await message.answer(texts.WEEK_EMPTY_TEXT, reply_markup=get_stats_keyboard(), parse_mode="Markdown")
        return

    text = texts.WEEK_HEADER_TEXT
    for day in week.days:
        text += texts.WEEK_DAY_TEXT.format(
            date=day.stat_date.strftime("%d.%m"),
            new_pages=day.daily_progress_pages,
            repeated=day.pages_repeated,
            pages=day.pages_memorized,
        )
    text += texts.WEEK_TOTAL_TEXT.format(
        new_pages=week.new_pages,
        repeated=week.pages_repeated,
        average=week.average_repeated,
    )
    await message.answer(text, reply_markup=get_stats_keyboard(), parse_mode="Markdown")


@router.message(F.text == texts.BTN_EXPORT)
async def export_stats(message: Message):
    if not message.from_user:
        return
    user_id = message.from_user.id
    try:
        csv_text = StatsService.export_csv(store, user_id)
    except StoreUnavailable:
        await message.answer(texts.STORE_ERROR_TEXT, reply_markup=get_stats_keyboard())
        return
    if not csv_text:
        await message.answer(texts.EXPORT_EMPTY_TEXT, reply_markup=get_stats_keyboard(), parse_mode="Markdown")
        return

    document = BufferedInputFile(
        csv_text.encode("utf-8-sig"),
        filename=f"hifz_stats_{user_id}_{local_today().isoformat()}.csv",
    )
    await message.answer_document(
        document,
        caption=texts.EXPORT_DONE_TEXT,
        reply_markup=get_stats_keyboard(),
        parse_mode="Markdown",
    )
