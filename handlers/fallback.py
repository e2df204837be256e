from aiogram import Router
from aiogram.types import Message

from core.texts import USE_MENU_TEXT
from keyboards.builders import get_main_menu_keyboard

router = Router()


@router.message()
async def unknown_text_fallback(message: Message):
    await message.answer(USE_MENU_TEXT, reply_markup=get_main_menu_keyboard())
