# ============================================================
# NOTIFIER - ОТПРАВКА ОТВЕТОВ БОТА
# ============================================================
# Все ответы бота идут через Notifier.
# Передаётся в хендлеры явно (через ServicesMiddleware).
#
# Режим LESS_BOT_SPAM: каждый ответ бота и команда, которая его вызвала,
# удаляются через BOT_EXPIRATION секунд, чтобы не засорять чат.
# ============================================================

import asyncio
import logging
from typing import Optional, Set

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message, User

from xpbot.utils.markdown_utils import escape_markdown

logger = logging.getLogger(__name__)


class Notifier:

    def __init__(self, bot: Bot, less_bot_spam: bool = False, expiration: float = 3):
        self.bot = bot
        self.less_bot_spam = less_bot_spam
        self.expiration = expiration
        # Держим ссылки на фоновые задачи удаления, пока они не завершатся
        self._pending: Set[asyncio.Task] = set()

    async def send_ephemeral(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        disable_notification: Optional[bool] = None,
        trigger: Optional[Message] = None,
    ) -> Message:
        """
        Отправляет сообщение и, если включён LESS_BOT_SPAM, планирует удаление.

        Args:
            chat_id: Куда отправить
            text: Текст сообщения
            parse_mode: Режим разметки (None - без разметки)
            disable_notification: Отправить без звука
            trigger: Сообщение пользователя, вызвавшее ответ (удаляется вместе с ответом)

        Returns:
            Отправленное сообщение
        """
        sent = await self.bot.send_message(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            disable_notification=disable_notification,
        )

        if self.less_bot_spam:
            message_ids = [sent.message_id]
            if trigger is not None:
                message_ids.insert(0, trigger.message_id)
            self._schedule_cleanup(chat_id, message_ids)

        return sent

    async def mention(
        self,
        chat_id: int,
        user: User,
        text: str,
        trigger: Optional[Message] = None,
    ) -> Message:
        """Ответ с обращением по имени: "<имя><text>", без звука, Markdown"""
        return await self.send_ephemeral(
            chat_id,
            display_name(user) + text,
            parse_mode=ParseMode.MARKDOWN,
            disable_notification=True,
            trigger=trigger,
        )

    def _schedule_cleanup(self, chat_id: int, message_ids: list) -> None:
        task = asyncio.create_task(self._delete_later(chat_id, message_ids))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _delete_later(self, chat_id: int, message_ids: list) -> None:
        """Удаляет сообщения через self.expiration секунд"""
        await asyncio.sleep(self.expiration)

        for message_id in message_ids:
            try:
                await self.bot.delete_message(chat_id=chat_id, message_id=message_id)
            except TelegramAPIError as e:
                # Сообщение могло быть уже удалено или у бота нет прав
                logger.debug(f"[NOTIFIER] Не удалось удалить сообщение {message_id} в {chat_id}: {e}")


def display_name(user: User) -> str:
    """Имя пользователя, безопасное для Markdown"""
    return escape_markdown(user.first_name)
