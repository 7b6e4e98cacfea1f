# ============================================================
# ХЕНДЛЕРЫ АКТИВНОСТИ - НАЧИСЛЕНИЕ XP И ПРОВЕРКА МЕДИА
# ============================================================
# Текст, голосовые и стикеры приносят по 1 XP (не чаще раза в RATE_LIMIT сек).
# Фото, видео и документы проходят через ModerationGate.
# ============================================================

import logging

from aiogram.enums import ChatType
from aiogram.types import Message

from xpbot.services.bot_services import BotServices
from xpbot.services.event_classifier import XP_COMMAND_PATTERN, has_text_link

logger = logging.getLogger(__name__)


async def handle_activity(message: Message, services: BotServices) -> None:
    """
    Начисляет XP за сообщение.

    XP не начисляется:
    - в личных сообщениях
    - за текст, в котором упоминается /xp
    - если в тексте скрытая ссылка, а у автора не хватает XP (сообщение удаляется)
    - если не истекло окно RATE_LIMIT
    """
    if message.chat.type == ChatType.PRIVATE:
        return

    if message.text and XP_COMMAND_PATTERN.search(message.text):
        return

    chat_id = message.chat.id
    user_id = message.from_user.id

    if has_text_link(message):
        allowed = await services.gate.check_and_enforce(message)
        if not allowed:
            return

    acquired = await services.rate_limiter.try_acquire(
        chat_id, user_id, services.settings.rate_limit
    )
    if not acquired:
        return

    await services.ledger.award(chat_id, user_id)


async def handle_media(message: Message, services: BotServices) -> None:
    """Фото, видео и документы: проверка XP без начисления"""
    await services.gate.check_and_enforce(message)
