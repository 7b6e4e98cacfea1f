# ============================================================
# ХЕНДЛЕР КОМАНДЫ /givexp - РУЧНОЕ НАЧИСЛЕНИЕ XP
# ============================================================
# Доступна администраторам группы и пользователям из ADMIN_IDS.
#
# Использование:
#   /givexp 10            - по реплаю на сообщение пользователя
#   /givexp 123456789 10  - по ID пользователя
#
# Отрицательное значение списывает XP. Если итог <= 0,
# пользователь удаляется из рейтинга.
# ============================================================

import logging
from typing import Optional, Tuple

from aiogram import Bot
from aiogram.enums import ChatType
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from xpbot.services.bot_services import BotServices
from xpbot.utils.logger import log_xp_granted

logger = logging.getLogger(__name__)

# ID бота GroupAnonymousBot (используется когда админ пишет анонимно)
GROUP_ANONYMOUS_BOT_ID = 1087968824

USAGE_TEXT = ", usage: reply with `/givexp 10` or send `/givexp <user id> 10`"


def parse_give_xp_args(message: Message) -> Optional[Tuple[int, int]]:
    """
    Разбирает аргументы /givexp.

    Returns:
        (target_user_id, amount) или None, если формат неверный
    """
    parts = (message.text or "").split()[1:]

    try:
        if len(parts) == 1 and message.reply_to_message and message.reply_to_message.from_user:
            return message.reply_to_message.from_user.id, int(parts[0])
        if len(parts) == 2:
            return int(parts[0]), int(parts[1])
    except ValueError:
        return None
    return None


async def is_xp_admin(bot: Bot, chat_id: int, user_id: int, admin_ids) -> bool:
    """
    Проверяет право выдавать XP.

    Args:
        bot: Экземпляр бота
        chat_id: ID группы
        user_id: ID пользователя
        admin_ids: ID из конфига с правом выдачи в любой группе

    Returns:
        True если пользователь в ADMIN_IDS, админ или создатель группы
    """
    if user_id in admin_ids:
        return True

    # Анонимный админ - только админы могут писать анонимно
    if user_id == GROUP_ANONYMOUS_BOT_ID:
        return True

    try:
        member = await bot.get_chat_member(chat_id, user_id)
        return member.status in ('creator', 'administrator')
    except TelegramAPIError as e:
        # Ошибка API - логируем и возвращаем False (безопасно)
        logger.warning(f"[GIVEXP] Ошибка проверки админа: {e}, chat={chat_id}, user={user_id}")
        return False


async def handle_give_xp(message: Message, services: BotServices) -> None:
    """Обработчик команды /givexp"""
    chat_id = message.chat.id
    user = message.from_user
    notifier = services.notifier

    if message.chat.type == ChatType.PRIVATE:
        await notifier.send_ephemeral(
            chat_id, "Sorry, you can't gain XP in private chats.", trigger=message
        )
        return

    if not await is_xp_admin(notifier.bot, chat_id, user.id, services.settings.admin_ids):
        logger.info(f"[GIVEXP] Отказано: user={user.id} chat={chat_id}")
        await notifier.mention(chat_id, user, ", only admins can give XP.", trigger=message)
        return

    args = parse_give_xp_args(message)
    if args is None:
        await notifier.mention(chat_id, user, USAGE_TEXT, trigger=message)
        return

    target_id, amount = args
    new_score = await services.ledger.grant(chat_id, target_id, amount)
    log_xp_granted(user.id, target_id, message.chat.title, chat_id, amount, new_score)

    if new_score is None:
        text = f", user {target_id} has been removed from the ranking."
    else:
        text = f", user {target_id} now has {new_score} XP."
    await notifier.mention(chat_id, user, text, trigger=message)
