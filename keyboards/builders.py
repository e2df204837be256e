from aiogram.types import KeyboardButton
from aiogram.utils.keyboard import ReplyKeyboardBuilder
from core.texts import (
    BTN_ADD_PAGE,
    BTN_BACK_SETTINGS,
    BTN_CURRENT_PROGRESS,
    BTN_EXPORT,
    BTN_HISTORY,
    BTN_HOME,
    BTN_MORE,
    BTN_MY_PAGES,
    BTN_MY_STATS,
    BTN_PLAN,
    BTN_PRIORITY,
    BTN_PRIORITY_ADD,
    BTN_PRIORITY_CLEAR,
    BTN_PRIORITY_LIST,
    BTN_PRIORITY_REMOVE,
    BTN_RESET_PLAN,
    BTN_SECTIONS_PER_DAY,
    BTN_SET_PAGES,
    BTN_SETTINGS,
    BTN_STATS_MENU,
    BTN_UNDO,
    BTN_WEEKLY,
    SECTIONS_PER_DAY_CHOICES,
)


def get_main_menu_keyboard():
    builder = ReplyKeyboardBuilder()
    # Row 1: Primary Action
    builder.row(KeyboardButton(text=BTN_PLAN))
    # Row 2: Progress
    builder.row(KeyboardButton(text=BTN_ADD_PAGE), KeyboardButton(text=BTN_UNDO))
    # Row 3: Everything else
    builder.row(KeyboardButton(text=BTN_MORE))
    return builder.as_markup(resize_keyboard=True)


def get_more_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_STATS_MENU), KeyboardButton(text=BTN_SETTINGS))
    builder.row(KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_stats_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_MY_STATS), KeyboardButton(text=BTN_WEEKLY))
    builder.row(KeyboardButton(text=BTN_HISTORY), KeyboardButton(text=BTN_EXPORT))
    builder.row(KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_history_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_UNDO))
    builder.row(KeyboardButton(text=BTN_STATS_MENU), KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_settings_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_MY_PAGES), KeyboardButton(text=BTN_SECTIONS_PER_DAY))
    builder.row(KeyboardButton(text=BTN_PRIORITY), KeyboardButton(text=BTN_RESET_PLAN))
    builder.row(KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_priority_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_PRIORITY_ADD), KeyboardButton(text=BTN_PRIORITY_REMOVE))
    builder.row(KeyboardButton(text=BTN_PRIORITY_LIST), KeyboardButton(text=BTN_PRIORITY_CLEAR))
    builder.row(KeyboardButton(text=BTN_BACK_SETTINGS), KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_sections_per_day_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(*(KeyboardButton(text=choice) for choice in SECTIONS_PER_DAY_CHOICES))
    builder.row(KeyboardButton(text=BTN_BACK_SETTINGS), KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_pages_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_CURRENT_PROGRESS), KeyboardButton(text=BTN_SET_PAGES))
    builder.row(KeyboardButton(text=BTN_BACK_SETTINGS), KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)


def get_input_keyboard():
    """Shown while waiting for free-text input so the user can bail out."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_BACK_SETTINGS), KeyboardButton(text=BTN_HOME))
    return builder.as_markup(resize_keyboard=True)
