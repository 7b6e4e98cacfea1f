"""
Классификация входящих сообщений.
Каждое сообщение получает ровно один тип, по которому выбирается хендлер.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from aiogram.types import Message


class MessageKind(Enum):
    """Тип входящего сообщения"""
    TEXT_ACTIVITY = "text_activity"  # Обычный текст - кандидат на XP
    VOICE_ACTIVITY = "voice_activity"  # Голосовое - кандидат на XP
    STICKER_ACTIVITY = "sticker_activity"  # Стикер - кандидат на XP
    MEDIA_FOR_MODERATION = "media_for_moderation"  # Фото/видео/документ - проверка XP
    HELP_COMMAND = "help_command"  # /start
    RANK_COMMAND = "rank_command"  # /xp
    TOP_RANKS_COMMAND = "top_ranks_command"  # /ranks
    GIVE_XP_COMMAND = "give_xp_command"  # /givexp
    UNRECOGNIZED = "unrecognized"  # Всё остальное - игнорируем


# Команда: /name, затем конец текста, пробел или @botname
COMMAND_PATTERN = re.compile(r"^/(?P<name>[A-Za-z0-9_]+)(?:@\w+)?(?:\s|$)")

COMMANDS = {
    "start": MessageKind.HELP_COMMAND,
    "xp": MessageKind.RANK_COMMAND,
    "ranks": MessageKind.TOP_RANKS_COMMAND,
    "givexp": MessageKind.GIVE_XP_COMMAND,
}

# Любое упоминание /xp в тексте исключает сообщение из начисления XP
XP_COMMAND_PATTERN = re.compile(r"/xp")


def parse_command(text: Optional[str]) -> Optional[str]:
    """Имя команды в нижнем регистре без / и @botname, либо None"""
    if not text:
        return None
    match = COMMAND_PATTERN.match(text)
    if match is None:
        return None
    return match.group("name").lower()


def classify_message(message: Message) -> MessageKind:
    """
    Определяет тип сообщения.

    Команды проверяются раньше обычного текста, поэтому "/xp"
    никогда не попадает в начисление XP как текст.
    """
    if message.text is not None:
        command = parse_command(message.text)
        if command is not None and command in COMMANDS:
            return COMMANDS[command]
        return MessageKind.TEXT_ACTIVITY

    if message.voice is not None:
        return MessageKind.VOICE_ACTIVITY

    if message.sticker is not None:
        return MessageKind.STICKER_ACTIVITY

    if message.photo or message.video is not None or message.document is not None:
        return MessageKind.MEDIA_FOR_MODERATION

    return MessageKind.UNRECOGNIZED


def has_text_link(message: Message) -> bool:
    """Есть ли в тексте скрытая ссылка (entity типа text_link)"""
    entities = message.entities or []
    return any(entity.type == "text_link" for entity in entities)
