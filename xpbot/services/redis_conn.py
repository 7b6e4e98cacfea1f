from redis.asyncio import Redis
import logging

logger = logging.getLogger(__name__)


def create_redis(redis_url: str) -> Redis:
    """Создаёт асинхронный клиент Redis (строки вместо bytes)"""
    return Redis.from_url(redis_url, decode_responses=True)


async def test_connection(redis: Redis) -> None:
    """Проверяет, что Redis доступен. Ошибку пробрасывает дальше - без Redis бот бесполезен"""
    try:
        await redis.ping()
        logger.info("✅ Соединение с Redis установлено")
    except Exception as e:
        logger.error(f"❌ Ошибка подключения к Redis: {e}")
        raise
