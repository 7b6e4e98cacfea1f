import asyncio
import logging
from typing import Optional, Set

import aiohttp

from xpbot.utils.html_utils import escape_html

logger = logging.getLogger(__name__)

# Заполняются через configure_journal() при старте бота
BOT_TOKEN: Optional[str] = None
LOG_CHANNEL_ID: Optional[str] = None

# Ссылки на задачи отправки, пока они не завершатся
_pending_logs: Set[asyncio.Task] = set()


def configure_journal(bot_token: Optional[str], log_channel_id: Optional[str]) -> None:
    """Включает журнал модерации в канал LOG_CHANNEL_ID"""
    global BOT_TOKEN, LOG_CHANNEL_ID
    BOT_TOKEN = bot_token
    LOG_CHANNEL_ID = log_channel_id


# ==== СПЕЦИАЛЬНЫЕ ФОРМАТИРОВАННЫЕ ЛОГИ ДЛЯ TELEGRAM ====

async def send_formatted_log(message):
    """Отправляет отформатированное сообщение в канал логов в Telegram"""
    if not BOT_TOKEN or not LOG_CHANNEL_ID:
        return

    url = f"https://api.telegram.org/bot{BOT_TOKEN}/sendMessage"
    payload = {
        "chat_id": LOG_CHANNEL_ID,
        "text": message,
        "parse_mode": "HTML",
        "disable_web_page_preview": True
    }

    async with aiohttp.ClientSession() as session:
        try:
            resp = await session.post(url, data=payload)
            if resp.status != 200:
                text = await resp.text()
                logger.warning(f"❌ Telegram API Error: {resp.status} — {text}")
        except Exception as e:
            logger.warning(f"❌ Ошибка при отправке лога в Telegram: {e}")


def _schedule_log(message: str) -> None:
    """Создает задачу для асинхронной отправки в Telegram (если журнал включён)"""
    if not BOT_TOKEN or not LOG_CHANNEL_ID:
        return
    task = asyncio.create_task(send_formatted_log(message))
    _pending_logs.add(task)
    task.add_done_callback(_pending_logs.discard)


def _chat_link(chat_id: int) -> str:
    # Для супергрупп убираем -100 и создаём ссылку
    return f"https://t.me/c/{str(chat_id).replace('-100', '')}"


def log_media_deleted(first_name, user_id, chat_name, chat_id, score=None):
    """Отправляет лог об удалении медиа у пользователя без нужного XP"""
    user_display = f"<a href='tg://user?id={user_id}'>{escape_html(first_name or f'id{user_id}')}</a>"

    msg = (
        f"🗑 #МЕДИА_УДАЛЕНО 🔴\n"
        f"• Кто: {user_display} [{user_id}]\n"
        f"• Группа: <a href='{_chat_link(chat_id)}'>{escape_html(chat_name or '')}</a> [{chat_id}]\n"
        f"• XP: {score if score is not None else 'нет в рейтинге'}\n"
        f"#id{user_id}"
    )

    logger.info(f"[MODERATION] Медиа удалено: user={user_id} chat={chat_id} xp={score}")
    _schedule_log(msg)


def log_xp_granted(admin_id, user_id, chat_name, chat_id, amount, new_score):
    """Отправляет лог о ручном начислении XP администратором"""
    msg = (
        f"🎁 #XP_ВЫДАН 🟢\n"
        f"• Кому: <a href='tg://user?id={user_id}'>id{user_id}</a> [{user_id}]\n"
        f"• Кто: <a href='tg://user?id={admin_id}'>id{admin_id}</a> [{admin_id}]\n"
        f"• Группа: <a href='{_chat_link(chat_id)}'>{escape_html(chat_name or '')}</a> [{chat_id}]\n"
        f"• Изменение: {amount:+d} → {new_score if new_score is not None else 'удалён из рейтинга'}\n"
        f"#id{user_id}"
    )

    logger.info(f"[GIVEXP] admin={admin_id} user={user_id} chat={chat_id} amount={amount}")
    _schedule_log(msg)
