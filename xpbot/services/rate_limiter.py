"""
Ограничение частоты начисления XP.

Один флаг на пару (группа, пользователь) с TTL, равным окну ограничения.
Пока флаг жив, новые XP не начисляются.
"""
import logging

from redis.asyncio import Redis

from xpbot.services.xp_ledger import XpLedger

logger = logging.getLogger(__name__)


class RateLimiter:

    def __init__(self, redis: Redis, ledger: XpLedger):
        self.redis = redis
        self.ledger = ledger

    async def try_acquire(self, group_id: int, user_id: int, window_seconds: int) -> bool:
        """
        Пытается занять окно начисления XP для пользователя.

        Args:
            group_id: ID группы
            user_id: ID пользователя
            window_seconds: Длина окна; 0/None выключает ограничение

        Returns:
            True если XP можно начислить, False если окно ещё не истекло
        """
        if not window_seconds:
            return True

        # SET NX EX - проверка и установка флага одной атомарной командой
        acquired = await self.redis.set(
            self.ledger.rate_flag_key(group_id, user_id),
            1,
            ex=window_seconds,
            nx=True,
        )
        if not acquired:
            logger.debug(f"[RATE_LIMIT] Окно занято: user={user_id} chat={group_id}")
        return bool(acquired)
