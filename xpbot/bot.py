import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from xpbot.config import ConfigError, Settings, load_settings, log_settings
from xpbot.handlers import create_message_router
from xpbot.middleware import ServicesMiddleware, StructuredLoggingMiddleware
from xpbot.services.bot_services import build_services
from xpbot.services.redis_conn import create_redis, test_connection
from xpbot.utils.logger import configure_journal

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Настройка корневого логгера: консоль + приглушённый aiogram"""
    root = logging.getLogger()
    root.setLevel(level)

    # Создаем обработчик для консоли
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(console_formatter)
    root.addHandler(console_handler)

    # Отключаем встроенное логирование aiogram для апдейтов - их пишет StructuredLoggingMiddleware
    for logger_name in ("aiogram.dispatcher", "aiogram.event"):
        logging.getLogger(logger_name).setLevel(logging.ERROR)


def create_dispatcher(services) -> Dispatcher:
    """Диспетчер с middleware и роутером сообщений"""
    dp = Dispatcher()

    # ✅ Подключение middleware - будет автоматически прокидывать сервисы в каждый хендлер
    dp.update.middleware(ServicesMiddleware(services))
    # outer middleware срабатывает раньше фильтров, поэтому логирует каждый апдейт
    dp.update.outer_middleware(StructuredLoggingMiddleware())

    dp.include_router(create_message_router())
    return dp


# главная асинхронная функция, запускающая бота
async def main(settings: Settings) -> None:
    log_settings(settings)
    configure_journal(settings.bot_token, settings.log_channel_id)

    redis = create_redis(settings.redis_url)
    await test_connection(redis)

    # ✅ Создание бота по токену из .env
    session = AiohttpSession(timeout=60.0)
    bot = Bot(token=settings.bot_token, session=session)

    services = build_services(settings, bot, redis)
    dp = create_dispatcher(services)

    logger.info("🤖 Бот успешно запущен и готов к работе.")
    try:
        # ✅ Выбираем режим запуска: webhook или polling
        if settings.use_webhook:
            logger.info("🌐 Запуск в режиме webhook...")
            from xpbot.webhook import run_webhook
            await run_webhook(bot, dp, settings)
        else:
            logger.info("🔄 Запуск в режиме polling...")
            # Удаление вебхука перед запуском поллинга
            await bot.delete_webhook(drop_pending_updates=True)
            await dp.start_polling(bot, allowed_updates=["message"])
    finally:
        await bot.session.close()
        await redis.aclose()


def run() -> None:
    """Точка входа консольной команды xpbot"""
    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logging()
        logger.critical(f"❌ {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("🛑 Бот остановлен пользователем")


if __name__ == "__main__":
    run()
