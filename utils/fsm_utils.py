from aiogram import BaseMiddleware
from aiogram.types import Message
from aiogram.fsm.context import FSMContext
import logging

from core import texts

MENU_BUTTONS = {
    texts.BTN_PLAN,
    texts.BTN_ADD_PAGE,
    texts.BTN_UNDO,
    texts.BTN_MORE,
    texts.BTN_HOME,
    texts.BTN_STATS_MENU,
    texts.BTN_SETTINGS,
    texts.BTN_BACK_SETTINGS,
}


class StateCleanupMiddleware(BaseMiddleware):
    """
    Clears FSM state when the user presses a navigation button or sends a
    command, so a pending "enter page count" prompt never swallows them.
    """
    async def __call__(self, handler, event, data):
        state: FSMContext | None = data.get("state")
        message = getattr(event, "message", None) if not isinstance(event, Message) else event

        if state and isinstance(message, Message) and message.text:
            if message.text.startswith("/") or message.text in MENU_BUTTONS:
                current_state = await state.get_state()
                if current_state:
                    logging.info(
                        f"Clearing state {current_state} for user {message.chat.id} due to {message.text}"
                    )
                    await state.clear()

        return await handler(event, data)
