# Сервисы бота: рейтинг XP, ограничение частоты, модерация медиа, отправка ответов
from xpbot.services.bot_services import BotServices, build_services
from xpbot.services.event_classifier import MessageKind, classify_message
from xpbot.services.moderation_gate import ModerationGate
from xpbot.services.notifier import Notifier
from xpbot.services.rate_limiter import RateLimiter
from xpbot.services.xp_ledger import Milestone, ScoreEntry, XpLedger

__all__ = [
    "BotServices",
    "build_services",
    "MessageKind",
    "classify_message",
    "ModerationGate",
    "Notifier",
    "RateLimiter",
    "Milestone",
    "ScoreEntry",
    "XpLedger",
]
