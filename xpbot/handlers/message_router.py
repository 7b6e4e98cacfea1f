# ============================================================
# MESSAGE ROUTER - ЕДИНАЯ ТОЧКА ВХОДА ДЛЯ СООБЩЕНИЙ
# ============================================================
# Вместо набора хендлеров с пересекающимися фильтрами один хендлер:
#   1. classify_message() определяет тип сообщения
#   2. по таблице MESSAGE_HANDLERS вызывается ровно один обработчик
#
# Так "/xp" не попадает одновременно и в команду, и в начисление XP.
# ============================================================

import logging
from typing import Awaitable, Callable, Dict

from aiogram import Router
from aiogram.types import Message

from xpbot.handlers.activity_handler import handle_activity, handle_media
from xpbot.handlers.give_xp_handler import handle_give_xp
from xpbot.handlers.help_handler import handle_help
from xpbot.handlers.rank_handlers import handle_rank, handle_top_ranks
from xpbot.services.bot_services import BotServices
from xpbot.services.event_classifier import MessageKind, classify_message

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Message, BotServices], Awaitable[None]]

# Таблица маршрутизации: тип сообщения -> обработчик
MESSAGE_HANDLERS: Dict[MessageKind, MessageHandler] = {
    MessageKind.TEXT_ACTIVITY: handle_activity,
    MessageKind.VOICE_ACTIVITY: handle_activity,
    MessageKind.STICKER_ACTIVITY: handle_activity,
    MessageKind.MEDIA_FOR_MODERATION: handle_media,
    MessageKind.HELP_COMMAND: handle_help,
    MessageKind.RANK_COMMAND: handle_rank,
    MessageKind.TOP_RANKS_COMMAND: handle_top_ranks,
    MessageKind.GIVE_XP_COMMAND: handle_give_xp,
}


async def dispatch_message(message: Message, services: BotServices) -> None:
    """Классифицирует сообщение и передаёт его своему обработчику"""
    # Сообщения от имени каналов и сервисные сообщения без автора не считаем
    if message.from_user is None:
        return

    kind = classify_message(message)
    handler = MESSAGE_HANDLERS.get(kind)
    if handler is None:
        return

    logger.debug(f"[ROUTER] {kind.value}: chat={message.chat.id} user={message.from_user.id}")
    await handler(message, services)


def create_message_router() -> Router:
    """Создаёт новый роутер (один роутер нельзя подключить к двум диспетчерам)"""
    router = Router(name="xp_message_router")
    router.message.register(dispatch_message)
    return router
