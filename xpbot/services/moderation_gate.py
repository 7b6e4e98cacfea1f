# ============================================================
# MODERATION GATE - МЕДИА ТОЛЬКО ДЛЯ ТЕХ, У КОГО ХВАТАЕТ XP
# ============================================================
# Фото, видео, документы и сообщения со скрытыми ссылками
# разрешены только при XP >= MIN_XP. Иначе:
#   1. сообщение удаляется
#   2. отправителю уходит уведомление в ЛС
#   3. запись отправителя в рейтинге удаляется целиком
#   4. счётчик удалённых сообщений группы +1
# ============================================================

import logging

from aiogram.enums import ChatType, ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from xpbot.services.notifier import Notifier
from xpbot.services.xp_ledger import XpLedger
from xpbot.utils.logger import log_media_deleted
from xpbot.utils.markdown_utils import escape_markdown

logger = logging.getLogger(__name__)


class ModerationGate:

    def __init__(self, ledger: XpLedger, notifier: Notifier, min_xp: int):
        self.ledger = ledger
        self.notifier = notifier
        self.min_xp = min_xp

    async def check_and_enforce(self, message: Message) -> bool:
        """
        Проверяет, может ли отправитель публиковать медиа.

        Returns:
            True если сообщение разрешено, False если удалено
        """
        if message.chat.type == ChatType.PRIVATE:
            return True

        chat_id = message.chat.id
        user_id = message.from_user.id

        score = await self.ledger.get_score(chat_id, user_id)
        if score is not None and score >= self.min_xp:
            return True

        logger.info(
            f"[MODERATION] Недостаточно XP: user={user_id} chat={chat_id} "
            f"xp={score} < {self.min_xp}"
        )

        try:
            await self.notifier.bot.delete_message(chat_id=chat_id, message_id=message.message_id)
        except TelegramAPIError as e:
            # Нет прав на удаление или сообщение уже удалено
            logger.warning(f"[MODERATION] Не удалось удалить сообщение {message.message_id} в {chat_id}: {e}")

        chat_name = f" to {message.chat.title}" if message.chat.title else ""
        try:
            await self.notifier.send_ephemeral(
                user_id,
                f"Sorry, but you don't have enough XP to send that{escape_markdown(chat_name)}. "
                f"Earn more XP by talking😉",
                parse_mode=ParseMode.MARKDOWN,
            )
        except TelegramAPIError as e:
            # Пользователь не начинал диалог с ботом или заблокировал его
            logger.warning(f"[MODERATION] Не удалось уведомить user={user_id} в ЛС: {e}")

        await self.ledger.remove(chat_id, user_id)
        await self.ledger.increment_deleted_count(chat_id)

        log_media_deleted(message.from_user.first_name, user_id, message.chat.title, chat_id, score)
        return False
