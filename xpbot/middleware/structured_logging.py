# middleware/structured_logging.py
"""
Middleware для структурированного логирования апдейтов от Telegram
"""
import logging
from typing import Callable, Dict, Any, Awaitable
from aiogram import BaseMiddleware
from aiogram.types import Update

logger = logging.getLogger(__name__)


def describe_update(event: Update) -> str:
    """Одна строка с сутью апдейта: тип, чат, отправитель, вид содержимого"""
    msg = event.message
    if msg is None:
        return f"update_id={event.update_id} type=other"

    if msg.text is not None:
        content = f"text={msg.text[:50]!r}"
    elif msg.photo:
        content = "photo"
    elif msg.video is not None:
        content = "video"
    elif msg.document is not None:
        content = "document"
    elif msg.voice is not None:
        content = "voice"
    elif msg.sticker is not None:
        content = "sticker"
    else:
        content = "other"

    from_id = msg.from_user.id if msg.from_user else None
    return (
        f"update_id={event.update_id} chat={msg.chat.id} ({msg.chat.type}) "
        f"from={from_id} {content}"
    )


class StructuredLoggingMiddleware(BaseMiddleware):
    """Middleware для структурированного логирования апдейтов"""

    async def __call__(
        self,
        handler: Callable[[Update, Dict[str, Any]], Awaitable[Any]],
        event: Update,
        data: Dict[str, Any]
    ) -> Any:
        logger.info(f"📩 {describe_update(event)}")

        try:
            result = await handler(event, data)
        except Exception as e:
            logger.error(f"❌ Ошибка обработки update id={event.update_id}: {e}")
            raise

        logger.debug(f"✅ Update id={event.update_id} обработан")
        return result
