# ============================================================
# XP LEDGER - ХРАНИЛИЩЕ ОЧКОВ ОПЫТА В REDIS
# ============================================================
# Для каждой группы хранится отсортированное множество (ZSET):
#   <prefix><group_id>  ->  {user_id: score}
#
# Рейтинг всегда считается на лету из текущих записей,
# никаких закэшированных позиций нет.
#
# Дополнительные ключи:
#   <prefix><group_id>_DELETED_COUNT     - сколько сообщений удалено за нехватку XP
#   <prefix><group_id>_TGUSER_<user_id>  - флаг ограничения (см. rate_limiter.py)
# ============================================================

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreEntry:
    """Запись рейтинга: пользователь и его XP"""
    user_id: int
    score: int


@dataclass(frozen=True)
class Milestone:
    """Ближайший соперник выше по рейтингу и разрыв до него"""
    gap: int
    user_id: int


class XpLedger:
    """Операции над рейтингом XP одной инсталляции бота"""

    def __init__(self, redis: Redis, prefix: str):
        self.redis = redis
        self.prefix = prefix

    # ─────────────────────────────────────────────────────────
    # КЛЮЧИ
    # ─────────────────────────────────────────────────────────

    def scores_key(self, group_id: int) -> str:
        return f"{self.prefix}{group_id}"

    def deleted_count_key(self, group_id: int) -> str:
        return f"{self.prefix}{group_id}_DELETED_COUNT"

    def rate_flag_key(self, group_id: int, user_id: int) -> str:
        return f"{self.prefix}{group_id}_TGUSER_{user_id}"

    # ─────────────────────────────────────────────────────────
    # ИЗМЕНЕНИЕ
    # ─────────────────────────────────────────────────────────

    async def award(self, group_id: int, user_id: int) -> int:
        """Начисляет 1 XP и возвращает новое значение"""
        new_score = await self.redis.zincrby(self.scores_key(group_id), 1, str(user_id))
        logger.debug(f"[XP] +1 user={user_id} chat={group_id} -> {int(new_score)}")
        return int(new_score)

    async def grant(self, group_id: int, user_id: int, amount: int) -> Optional[int]:
        """
        Начисляет (или списывает) произвольное количество XP.

        Если итоговое значение <= 0, запись удаляется целиком.

        Returns:
            Новое значение XP или None, если запись удалена
        """
        key = self.scores_key(group_id)
        new_score = int(await self.redis.zincrby(key, amount, str(user_id)))
        if new_score <= 0:
            await self.redis.zrem(key, str(user_id))
            return None
        return new_score

    async def remove(self, group_id: int, user_id: int) -> None:
        """Удаляет запись пользователя целиком (не уменьшает)"""
        await self.redis.zrem(self.scores_key(group_id), str(user_id))

    async def increment_deleted_count(self, group_id: int) -> int:
        return await self.redis.incrby(self.deleted_count_key(group_id), 1)

    # ─────────────────────────────────────────────────────────
    # ЧТЕНИЕ
    # ─────────────────────────────────────────────────────────

    async def get_score(self, group_id: int, user_id: int) -> Optional[int]:
        """XP пользователя или None, если он ещё не в рейтинге"""
        score = await self.redis.zscore(self.scores_key(group_id), str(user_id))
        if score is None:
            return None
        return int(score)

    async def get_rank(self, group_id: int, user_id: int) -> Optional[Tuple[int, int]]:
        """
        Позиция пользователя в рейтинге группы.

        Returns:
            (rank, total), где rank начинается с 1, или None, если записи нет
        """
        key = self.scores_key(group_id)
        rank = await self.redis.zrevrank(key, str(user_id))
        if rank is None:
            return None
        total = await self.redis.zcard(key)
        return rank + 1, total

    async def count(self, group_id: int) -> int:
        return await self.redis.zcard(self.scores_key(group_id))

    async def get_next_milestone(self, group_id: int, score: int) -> Optional[Milestone]:
        """
        Ищет ближайшего соперника со счётом строго больше score + 1.

        Соперник с отрывом в 1 XP пропускается: его не отличить от ничьей
        после следующего сообщения.
        """
        result = await self.redis.zrangebyscore(
            self.scores_key(group_id),
            score + 2,
            "+inf",
            start=0,
            num=1,
            withscores=True,
        )
        if not result:
            return None
        member, rival_score = result[0]
        return Milestone(gap=int(rival_score) - score, user_id=int(member))

    async def get_top(self, group_id: int, n: int = 3) -> List[ScoreEntry]:
        """Первые n записей по убыванию XP"""
        rows = await self.redis.zrevrange(self.scores_key(group_id), 0, n - 1, withscores=True)
        return [ScoreEntry(user_id=int(member), score=int(score)) for member, score in rows]

    async def get_deleted_count(self, group_id: int) -> int:
        value = await self.redis.get(self.deleted_count_key(group_id))
        return int(value) if value else 0
