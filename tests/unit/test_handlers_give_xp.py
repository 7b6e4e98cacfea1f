"""
Unit тесты для /givexp.
"""
from dataclasses import replace

import pytest

from xpbot.handlers.give_xp_handler import (
    GROUP_ANONYMOUS_BOT_ID,
    handle_give_xp,
    is_xp_admin,
    parse_give_xp_args,
)
from xpbot.services.bot_services import build_services


def _sent_text(bot_mock):
    return bot_mock.send_message.await_args.kwargs["text"]


def test_parse_args_by_reply(message_factory):
    message = message_factory(text="/givexp 10", reply_to_user_id=55)

    assert parse_give_xp_args(message) == (55, 10)


def test_parse_args_by_id(message_factory):
    assert parse_give_xp_args(message_factory(text="/givexp 55 -3")) == (55, -3)


@pytest.mark.parametrize("text", ["/givexp", "/givexp ten", "/givexp 10", "/givexp a b", "/givexp 1 2 3"])
def test_parse_args_invalid(message_factory, text):
    assert parse_give_xp_args(message_factory(text=text)) is None


@pytest.mark.asyncio
async def test_is_xp_admin(bot_mock, chat_member_factory):
    bot_mock.get_chat_member.return_value = chat_member_factory(status="administrator")
    assert await is_xp_admin(bot_mock, -100, 1, [])

    bot_mock.get_chat_member.return_value = chat_member_factory(status="member")
    assert not await is_xp_admin(bot_mock, -100, 1, [])
    assert await is_xp_admin(bot_mock, -100, 1, [1])
    assert await is_xp_admin(bot_mock, -100, GROUP_ANONYMOUS_BOT_ID, [])


@pytest.mark.asyncio
async def test_non_admin_cannot_give(services, bot_mock, message_factory, chat_member_factory):
    """Тест: обычный участник не меняет рейтинг"""
    bot_mock.get_chat_member.return_value = chat_member_factory(status="member")
    message = message_factory(text="/givexp 100", user_id=1, first_name="Eve", reply_to_user_id=1)

    await handle_give_xp(message, services)

    assert await services.ledger.get_score(message.chat.id, 1) is None
    assert _sent_text(bot_mock) == "Eve, only admins can give XP."


@pytest.mark.asyncio
async def test_admin_gives_xp_by_reply(settings, bot_mock, fake_redis, message_factory):
    services = build_services(replace(settings, admin_ids=[1]), bot_mock, fake_redis)
    message = message_factory(text="/givexp 25", user_id=1, first_name="Boss", reply_to_user_id=2)

    await handle_give_xp(message, services)

    assert await services.ledger.get_score(message.chat.id, 2) == 25
    assert _sent_text(bot_mock) == "Boss, user 2 now has 25 XP."


@pytest.mark.asyncio
async def test_admin_takes_all_xp(services, bot_mock, message_factory, fake_redis, chat_member_factory):
    bot_mock.get_chat_member.return_value = chat_member_factory(status="creator")
    message = message_factory(text="/givexp 2 -50", user_id=1, first_name="Boss")
    await fake_redis.zadd(f"XPBOT_{message.chat.id}", {"2": 30})

    await handle_give_xp(message, services)

    assert await services.ledger.get_score(message.chat.id, 2) is None
    assert _sent_text(bot_mock) == "Boss, user 2 has been removed from the ranking."


@pytest.mark.asyncio
async def test_admin_bad_usage(services, bot_mock, message_factory, chat_member_factory):
    bot_mock.get_chat_member.return_value = chat_member_factory(status="administrator")

    await handle_give_xp(message_factory(text="/givexp lots"), services)

    assert "usage" in _sent_text(bot_mock)


@pytest.mark.asyncio
async def test_give_xp_private_chat(services, bot_mock, message_factory):
    await handle_give_xp(message_factory(text="/givexp 1 1", chat_type="private"), services)

    assert _sent_text(bot_mock) == "Sorry, you can't gain XP in private chats."
    bot_mock.get_chat_member.assert_not_awaited()
