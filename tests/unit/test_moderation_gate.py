"""
Unit тесты для ModerationGate.
Медиа разрешено только при XP >= MIN_XP.
"""
import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.methods import DeleteMessage, SendMessage


@pytest.mark.asyncio
async def test_low_xp_media_is_deleted(services, bot_mock, message_factory):
    """Тест: XP < порога → удаление, ЛС, удаление из рейтинга, счётчик +1"""
    message = message_factory(kind="photo", user_id=7, message_id=55)
    chat_id = message.chat.id
    for _ in range(5):
        await services.ledger.award(chat_id, 7)

    allowed = await services.gate.check_and_enforce(message)

    assert allowed is False
    bot_mock.delete_message.assert_awaited_once_with(chat_id=chat_id, message_id=55)
    notice = bot_mock.send_message.await_args.kwargs
    assert notice["chat_id"] == 7
    assert notice["text"].startswith("Sorry, but you don't have enough XP to send that to Test chat.")
    assert await services.ledger.get_score(chat_id, 7) is None
    assert await services.ledger.get_deleted_count(chat_id) == 1


@pytest.mark.asyncio
async def test_unranked_user_media_is_deleted(services, bot_mock, message_factory):
    message = message_factory(kind="video", user_id=8)

    assert await services.gate.check_and_enforce(message) is False
    assert await services.ledger.get_deleted_count(message.chat.id) == 1


@pytest.mark.asyncio
async def test_enough_xp_media_is_allowed(services, bot_mock, message_factory, fake_redis):
    """Тест: XP ровно на пороге → ничего не делаем"""
    message = message_factory(kind="document", user_id=9)
    await fake_redis.zadd(f"XPBOT_{message.chat.id}", {"9": 15})

    assert await services.gate.check_and_enforce(message) is True
    bot_mock.delete_message.assert_not_awaited()
    bot_mock.send_message.assert_not_awaited()
    assert await services.ledger.get_score(message.chat.id, 9) == 15
    assert await services.ledger.get_deleted_count(message.chat.id) == 0


@pytest.mark.asyncio
async def test_private_chat_is_always_allowed(services, bot_mock, message_factory):
    message = message_factory(kind="photo", chat_type="private")

    assert await services.gate.check_and_enforce(message) is True
    bot_mock.delete_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_title_is_escaped(services, bot_mock, message_factory):
    message = message_factory(kind="photo", chat_title="dev_chat *fun*")

    await services.gate.check_and_enforce(message)

    text = bot_mock.send_message.await_args.kwargs["text"]
    assert "to dev\\_chat \\*fun\\*." in text


@pytest.mark.asyncio
async def test_failed_private_notice_still_enforces(services, bot_mock, message_factory):
    """Тест: пользователь не писал боту - ЛС не доходит, но запись всё равно удаляется"""
    bot_mock.send_message.side_effect = TelegramForbiddenError(
        method=SendMessage(chat_id=7, text="x"), message="bot can't initiate conversation"
    )
    message = message_factory(kind="photo", user_id=7)
    await services.ledger.award(message.chat.id, 7)

    assert await services.gate.check_and_enforce(message) is False
    assert await services.ledger.get_score(message.chat.id, 7) is None
    assert await services.ledger.get_deleted_count(message.chat.id) == 1


@pytest.mark.asyncio
async def test_failed_delete_still_enforces(services, bot_mock, message_factory):
    """Тест: у бота нет прав на удаление - ЛС, удаление из рейтинга и счётчик всё равно срабатывают"""
    message = message_factory(kind="photo", user_id=7, message_id=56)
    bot_mock.delete_message.side_effect = TelegramBadRequest(
        method=DeleteMessage(chat_id=message.chat.id, message_id=56),
        message="message can't be deleted",
    )
    await services.ledger.award(message.chat.id, 7)

    assert await services.gate.check_and_enforce(message) is False
    assert bot_mock.send_message.await_args.kwargs["chat_id"] == 7
    assert await services.ledger.get_score(message.chat.id, 7) is None
    assert await services.ledger.get_deleted_count(message.chat.id) == 1
