from aiogram import BaseMiddleware
import logging

from utils.ops_logging import log_structured


class UpdateTrackingMiddleware(BaseMiddleware):
    async def __call__(self, handler, event, data):
        try:
            return await handler(event, data)
        except Exception as exc:
            log_structured(
                "update_failed",
                level=logging.ERROR,
                where_ctx=type(event).__name__,
                user_id=_extract_user_id(event, data),
                update_id=_extract_update_id(data),
                error_type=type(exc).__name__,
                message_short=str(exc)[:200],
            )
            logging.exception("Unhandled update exception", exc_info=exc)
            raise


def _extract_update_id(data):
    event_update = data.get("event_update")
    update_id = getattr(event_update, "update_id", None)
    return int(update_id) if update_id else None


def _extract_user_id(event, data):
    event_from_user = data.get("event_from_user") or getattr(event, "from_user", None)
    user_id = getattr(event_from_user, "id", None)
    return int(user_id) if user_id else None
