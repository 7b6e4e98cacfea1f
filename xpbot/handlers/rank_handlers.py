# ============================================================
# ХЕНДЛЕРЫ /xp И /ranks - ПРОСМОТР РЕЙТИНГА
# ============================================================
# /xp    - XP и место пользователя в рейтинге группы
#          (по реплаю или /xp <user id> - другого участника)
# /ranks - тройка лидеров группы
#
# В ЛС обе команды только подсказывают добавить бота в группу.
# ============================================================

import logging
from typing import Optional

from aiogram import Bot
from aiogram.enums import ChatType, ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message, User

from xpbot.services.bot_services import BotServices
from xpbot.services.notifier import display_name

logger = logging.getLogger(__name__)


# ============================================================
# КОНСТАНТЫ
# ============================================================
# Сколько мест показывает /ranks (меньше - не показываем вообще)
TOP_RANKS_SIZE = 3

MEDALS = ("🥇", "🥈", "🥉")

CROWN = "👑"

UNKNOWN_RIVAL_NAME = "an unknown user"
GHOST_NAME = "A ghost"


# ============================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# ============================================================


async def resolve_user(bot: Bot, chat_id: int, user_id: int, placeholder_name: str) -> User:
    """
    Получает профиль участника группы.

    Ошибки API не пробрасываются: пользователь мог покинуть группу,
    тогда возвращается заглушка с id=0 и placeholder_name.
    """
    try:
        member = await bot.get_chat_member(chat_id, user_id)
        if member and member.user:
            return member.user
    except TelegramAPIError as e:
        logger.debug(f"[RANKS] Не удалось получить профиль user={user_id} в {chat_id}: {e}")
    return User(id=0, is_bot=False, first_name=placeholder_name)


def _format_rank_line(score: int, rank: int, total: int, min_xp: int,
                      gap: Optional[int] = None, rival: Optional[User] = None) -> str:
    """
    Текст ответа на /xp (после имени пользователя).

    Ниже порога показываем только место, выше - XP и разрыв до соперника
    или корону, если обгонять некого.
    """
    if score < min_xp:
        return f", your rank is {rank} / {total}."

    line = f", you have {score} XP  ◎  Rank {rank} / {total}  ◎  "
    if rival is None:
        return line + CROWN
    return line + f"{gap} to beat {display_name(rival)}"


# ============================================================
# /xp
# ============================================================


def parse_rank_target(message: Message) -> Optional[int]:
    """
    Чей рейтинг показать по /xp.

    Returns:
        ID автора сообщения, на которое ответили, ID из аргумента (/xp 123456789)
        или None, если смотрим свой рейтинг
    """
    reply = message.reply_to_message
    if reply and reply.from_user and not reply.from_user.is_bot:
        return reply.from_user.id

    parts = (message.text or "").split()[1:]
    if len(parts) == 1 and parts[0].isdigit():
        return int(parts[0])
    return None


async def handle_rank(message: Message, services: BotServices) -> None:
    """Обработчик команды /xp: свой рейтинг или рейтинг другого участника"""
    chat_id = message.chat.id
    notifier = services.notifier

    if message.chat.type == ChatType.PRIVATE:
        await notifier.send_ephemeral(
            chat_id, "Sorry, you can't gain XP in private chats.", trigger=message
        )
        return

    user = message.from_user
    user_id = user.id
    target_id = parse_rank_target(message)
    if target_id is not None and target_id != user_id:
        user_id = target_id
        reply = message.reply_to_message
        if reply and reply.from_user and reply.from_user.id == target_id:
            user = reply.from_user
        else:
            user = await resolve_user(notifier.bot, chat_id, target_id, f"id{target_id}")

    ledger = services.ledger
    score = await ledger.get_score(chat_id, user_id)
    rank_info = await ledger.get_rank(chat_id, user_id) if score is not None else None
    if rank_info is None:
        await notifier.mention(chat_id, user, ", you're not ranked yet 👶", trigger=message)
        return

    rank, total = rank_info
    min_xp = services.settings.min_xp

    gap = None
    rival = None
    if score >= min_xp:
        milestone = await ledger.get_next_milestone(chat_id, score)
        if milestone is not None:
            gap = milestone.gap
            rival = await resolve_user(notifier.bot, chat_id, milestone.user_id, UNKNOWN_RIVAL_NAME)

    logger.info(f"[XP] /xp user={user_id} chat={chat_id}: xp={score} rank={rank}/{total}")
    await notifier.mention(
        chat_id, user, _format_rank_line(score, rank, total, min_xp, gap, rival), trigger=message
    )


# ============================================================
# /ranks
# ============================================================


async def handle_top_ranks(message: Message, services: BotServices) -> None:
    """Обработчик команды /ranks"""
    chat_id = message.chat.id
    notifier = services.notifier

    logger.info(f"[RANKS] Топ для группы {chat_id}")
    if message.chat.type == ChatType.PRIVATE:
        await notifier.send_ephemeral(chat_id, "Please add me to a group.")
        return

    ledger = services.ledger
    # Неполную таблицу лидеров не показываем
    if await ledger.count(chat_id) < TOP_RANKS_SIZE:
        return

    top = await ledger.get_top(chat_id, TOP_RANKS_SIZE)
    lines = []
    for medal, entry in zip(MEDALS, top):
        user = await resolve_user(notifier.bot, chat_id, entry.user_id, GHOST_NAME)
        lines.append(f"{medal} {display_name(user)}: {entry.score} XP")

    await notifier.send_ephemeral(
        chat_id,
        " \n".join(lines),
        parse_mode=ParseMode.MARKDOWN,
        disable_notification=True,
        trigger=message,
    )
