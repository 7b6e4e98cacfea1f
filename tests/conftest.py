import itertools
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Callable, Optional
from unittest.mock import AsyncMock

import pytest
from aiogram import Bot
from aiogram.types import Message
from fakeredis import aioredis as fakeredis_aioredis

from xpbot.config import Settings
from xpbot.services.bot_services import build_services

GROUP_ID = -1001234567890


@pytest.fixture
async def fake_redis():
    """fakeredis вместо настоящего Redis для unit тестов."""
    client = fakeredis_aioredis.FakeRedis(decode_responses=True)

    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture
def bot_mock():
    """Async mock for aiogram Bot."""
    sent_ids = itertools.count(1000)

    bot = AsyncMock(spec=Bot)
    bot.send_message = AsyncMock(side_effect=lambda **kwargs: SimpleNamespace(message_id=next(sent_ids)))
    bot.delete_message = AsyncMock()
    bot.get_chat_member = AsyncMock()
    bot.id = 424242
    return bot


@pytest.fixture
def settings() -> Settings:
    # Ограничение частоты выключено, чтобы каждое сообщение давало XP
    return Settings(bot_token="123:TEST", min_xp=15, rate_limit=0)


@pytest.fixture
def services(settings, bot_mock, fake_redis):
    return build_services(settings, bot_mock, fake_redis)


@pytest.fixture
def message_factory() -> Callable[..., Message]:
    """Factory for aiogram Message instances."""

    def _factory(
        *,
        message_id: int = 1,
        user_id: int = 100,
        chat_id: int = GROUP_ID,
        text: Optional[str] = "hello",
        kind: str = "text",
        chat_type: str = "supergroup",
        chat_title: Optional[str] = "Test chat",
        first_name: str = "Test",
        entities: Optional[list] = None,
        reply_to_user_id: Optional[int] = None,
    ) -> Message:
        if chat_type == "private":
            chat = {"id": user_id, "type": "private", "first_name": first_name}
        else:
            chat = {"id": chat_id, "type": chat_type, "title": chat_title}

        payload = {
            "message_id": message_id,
            "date": datetime.now(timezone.utc),
            "chat": chat,
            "from": {"id": user_id, "is_bot": False, "first_name": first_name},
        }

        if kind == "text":
            payload["text"] = text
            if entities:
                payload["entities"] = entities
        elif kind == "photo":
            payload["photo"] = [{"file_id": "photo", "file_unique_id": "photo-u", "width": 90, "height": 90}]
        elif kind == "video":
            payload["video"] = {
                "file_id": "video", "file_unique_id": "video-u",
                "width": 640, "height": 480, "duration": 3,
            }
        elif kind == "document":
            payload["document"] = {"file_id": "doc", "file_unique_id": "doc-u"}
        elif kind == "voice":
            payload["voice"] = {"file_id": "voice", "file_unique_id": "voice-u", "duration": 2}
        elif kind == "sticker":
            payload["sticker"] = {
                "file_id": "sticker", "file_unique_id": "sticker-u", "type": "regular",
                "width": 512, "height": 512, "is_animated": False, "is_video": False,
            }
        elif kind == "location":
            payload["location"] = {"latitude": 55.75, "longitude": 37.61}

        if reply_to_user_id is not None:
            payload["reply_to_message"] = {
                "message_id": message_id - 1,
                "date": datetime.now(timezone.utc),
                "chat": chat,
                "from": {"id": reply_to_user_id, "is_bot": False, "first_name": "Target"},
                "text": "earlier message",
            }

        return Message.model_validate(payload)

    return _factory


@pytest.fixture
def chat_member_factory():
    """Ответы get_chat_member: участник с именем и статусом"""

    def _factory(first_name: str = "Rival", status: str = "member", user_id: int = 1):
        return SimpleNamespace(status=status, user=SimpleNamespace(id=user_id, first_name=first_name))

    return _factory
