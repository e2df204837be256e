import asyncio
import logging
import sys
from aiohttp import web
from aiogram import Bot, Dispatcher, types
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from core.config import settings
from core.texts import GENERIC_ERROR_TEXT
from database import create_table
from database.connection import close_postgres_pool
from utils.scheduler import start_scheduler, stop_scheduler
from utils.update_tracking import UpdateTrackingMiddleware
from utils.fsm_utils import StateCleanupMiddleware

from handlers.common import router as common_router
from handlers.plan import router as plan_router
from handlers.history import router as history_router
from handlers.stats import router as stats_router
from handlers.priority import router as priority_router
from handlers.progress import router as progress_router
from handlers.fallback import router as fallback_router


async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    # Initialize Database
    create_table()
    logging.info("DB backend: %s, path: %s", settings.db_backend, settings.db_path)

    if not settings.bot_token:
        logging.error("BOT_TOKEN is not set!")
        return

    # Bot & Dispatcher
    bot = Bot(token=settings.bot_token)
    dp = Dispatcher(storage=MemoryStorage())

    # Middlewares
    dp.update.outer_middleware(UpdateTrackingMiddleware())
    dp.update.outer_middleware(StateCleanupMiddleware())

    # Register Routers; fallback must stay last
    routers = [
        common_router, plan_router, history_router,
        stats_router, priority_router, progress_router,
        fallback_router,
    ]
    for router in routers:
        dp.include_router(router)

    # Global Error Handler
    @dp.error()
    async def global_error_handler(event: types.ErrorEvent):
        logging.exception(f"Global error: {event.exception}")
        if event.update.message:
            await event.update.message.answer(GENERIC_ERROR_TEXT)
        return True

    await bot.set_my_commands(
        [
            types.BotCommand(command="start", description="Запустить бота"),
            types.BotCommand(command="plan", description="План на сегодня"),
            types.BotCommand(command="undo", description="Отменить последнее действие"),
            types.BotCommand(command="stats", description="Статистика"),
            types.BotCommand(command="settings", description="Настройки"),
            types.BotCommand(command="menu", description="Главное меню"),
        ],
        scope=types.BotCommandScopeDefault(),
    )

    await start_scheduler(bot)

    if settings.delivery_mode == "webhook":
        if not settings.webhook_url:
            logging.error("WEBHOOK_URL (or WEBHOOK_BASE_URL + WEBHOOK_PATH) is required in webhook mode.")
            stop_scheduler()
            return

        await bot.set_webhook(
            url=settings.webhook_url,
            secret_token=(settings.webhook_secret_token or None),
            drop_pending_updates=False,
        )

        app = web.Application()
        webhook_requests_handler = SimpleRequestHandler(
            dispatcher=dp,
            bot=bot,
            secret_token=(settings.webhook_secret_token or None),
        )
        webhook_requests_handler.register(app, path=settings.webhook_path)
        setup_application(app, dp, bot=bot)

        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host=settings.webhook_host, port=settings.webhook_port)
        await site.start()

        logging.info(
            "Hifz bot started in webhook mode. listen=%s:%s path=%s",
            settings.webhook_host,
            settings.webhook_port,
            settings.webhook_path,
        )
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            stop_scheduler()
            await runner.cleanup()
            close_postgres_pool()
    else:
        await bot.delete_webhook(drop_pending_updates=True)
        logging.info("Hifz bot started in polling mode.")
        try:
            await dp.start_polling(bot)
        finally:
            stop_scheduler()
            close_postgres_pool()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Bot stopped by user.")
