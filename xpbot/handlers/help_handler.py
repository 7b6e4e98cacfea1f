from aiogram.enums import ChatType
from aiogram.types import Message

from xpbot.services.bot_services import BotServices

HELP_TEXT = (
    "Hi, I'm XP Bot. Add me to a group and I will track users' message count (XP). "
    "Available commands:\n"
    " - /xp displays the XP count and rank of the user\n"
    " - /ranks displays the top 3"
)


async def handle_help(message: Message, services: BotServices) -> None:
    """/start - справка, только в ЛС"""
    if message.chat.type != ChatType.PRIVATE:
        return
    await services.notifier.send_ephemeral(message.chat.id, HELP_TEXT)
