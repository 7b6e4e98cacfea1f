"""
Webhook режим для Telegram бота
"""
import asyncio
import logging

from aiohttp import web
from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from xpbot.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = ["message"]


async def health_check(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": "xp_bot"})


def create_app(bot: Bot, dp: Dispatcher, settings: Settings) -> web.Application:
    """Создание веб-приложения: webhook для Telegram и /health для мониторинга"""
    app = web.Application()

    webhook_requests_handler = SimpleRequestHandler(dispatcher=dp, bot=bot)
    webhook_requests_handler.register(app, path=settings.webhook_path)
    setup_application(app, dp, bot=bot)

    app.router.add_get("/health", health_check)
    return app


async def setup_webhook(bot: Bot, settings: Settings) -> None:
    """Регистрирует webhook в Telegram"""
    if not settings.webhook_url:
        logger.error("❌ WEBHOOK_URL не установлен в конфигурации! Проверьте .env файл.")
        raise ValueError("WEBHOOK_URL не установлен")

    logger.info(f"🔧 Установка webhook: {settings.webhook_url}")
    await bot.set_webhook(
        url=settings.webhook_url,
        drop_pending_updates=True,
        allowed_updates=ALLOWED_UPDATES,
    )

    webhook_info = await bot.get_webhook_info()
    if webhook_info.url == settings.webhook_url:
        logger.info(f"✅ Webhook установлен: {settings.webhook_url}")
    else:
        logger.warning(f"⚠️ Webhook установлен, но URL не совпадает: {webhook_info.url}")

    if webhook_info.last_error_date:
        logger.warning(f"⚠️ Последняя ошибка webhook: {webhook_info.last_error_message}")


async def run_webhook(bot: Bot, dp: Dispatcher, settings: Settings) -> None:
    """Запуск webhook сервера (SSL терминируется на nginx)"""
    await setup_webhook(bot, settings)

    app = create_app(bot, dp, settings)
    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, host="0.0.0.0", port=settings.webhook_port)
    await site.start()
    logger.info(f"🚀 Webhook сервер запущен на порту {settings.webhook_port}")

    try:
        # Ждём, пока процесс не остановят
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
