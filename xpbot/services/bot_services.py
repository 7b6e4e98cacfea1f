from dataclasses import dataclass

from aiogram import Bot
from redis.asyncio import Redis

from xpbot.config import Settings
from xpbot.services.moderation_gate import ModerationGate
from xpbot.services.notifier import Notifier
from xpbot.services.rate_limiter import RateLimiter
from xpbot.services.xp_ledger import XpLedger


@dataclass
class BotServices:
    """Всё, что нужно хендлерам: настройки и сервисы поверх Redis и Bot API"""
    settings: Settings
    ledger: XpLedger
    rate_limiter: RateLimiter
    gate: ModerationGate
    notifier: Notifier


def build_services(settings: Settings, bot: Bot, redis: Redis) -> BotServices:
    """Собирает сервисы из настроек и клиентов"""
    ledger = XpLedger(redis, settings.redis_prefix)
    notifier = Notifier(bot, less_bot_spam=settings.less_bot_spam, expiration=settings.bot_expiration)
    return BotServices(
        settings=settings,
        ledger=ledger,
        rate_limiter=RateLimiter(redis, ledger),
        gate=ModerationGate(ledger, notifier, settings.min_xp),
        notifier=notifier,
    )
