# -*- coding: utf-8 -*-
"""
Дневная квота бесплатных проверок и PRO-доступ.

Политика списания: проверка резервируется до запроса к провайдеру и
возвращается через release(), если карточку компании получить не удалось.
Ответ из кэша тоже считается проверкой.
"""
from datetime import datetime
from typing import Callable, Optional

from core.errors import PersistenceError
from core.logger import get_logger
from domain.models import QuotaDecision, UserProfile, utcnow
from domain.repository import QuotaRepository, UserRepository

log = get_logger(__name__)


def day_key(now: datetime) -> str:
    """YYYY-MM-DD в UTC"""
    return now.strftime("%Y-%m-%d")


class QuotaLedger:
    """Счётчик бесплатных проверок по пользователю и дню"""

    def __init__(self, quotas: QuotaRepository, users: Optional[UserRepository], daily_limit: int,
                 fail_open: bool = True, clock: Callable[[], datetime] = utcnow):
        self.quotas = quotas
        self.users = users
        self.daily_limit = daily_limit
        self.fail_open = fail_open
        self.clock = clock

    async def check_and_reserve(self, user: UserProfile) -> QuotaDecision:
        now = self.clock()
        if user.is_pro(now):
            return QuotaDecision(allowed=True, remaining=None, limit=self.daily_limit,
                                 is_pro=True, pro_until=user.pro_until)

        if self.daily_limit <= 0:
            return QuotaDecision(allowed=False, remaining=0, limit=self.daily_limit)

        day = day_key(now)
        try:
            used = await self.quotas.try_increment(user.tg_user_id, day, self.daily_limit)
        except PersistenceError as e:
            return self._degraded(user.tg_user_id, e)

        if used is None:
            log.info("quota exhausted", user_id=user.tg_user_id, limit=self.daily_limit)
            return QuotaDecision(allowed=False, remaining=0, limit=self.daily_limit)

        remaining = max(0, self.daily_limit - used)
        log.debug("quota reserved", user_id=user.tg_user_id, used=used, remaining=remaining)
        await self._remember_left(user.tg_user_id, remaining)
        return QuotaDecision(allowed=True, remaining=remaining, limit=self.daily_limit, day=day)

    async def release(self, decision: QuotaDecision, user: UserProfile) -> QuotaDecision:
        """Возвращает зарезервированную проверку. Для PRO и деградированного режима ничего не делает."""
        if not decision.allowed or decision.is_pro or decision.degraded:
            return decision
        today = day_key(self.clock())
        day = decision.day or today
        try:
            await self.quotas.decrement(user.tg_user_id, day)
        except PersistenceError as e:
            log.error("quota release failed", user_id=user.tg_user_id, error=str(e))
            return decision
        remaining = min(self.daily_limit, (decision.remaining or 0) + 1)
        log.debug("quota released", user_id=user.tg_user_id, remaining=remaining)
        if day == today:
            await self._remember_left(user.tg_user_id, remaining)
        return decision.model_copy(update={"remaining": remaining})

    async def remaining(self, user: UserProfile) -> QuotaDecision:
        """Текущее состояние квоты без списания"""
        now = self.clock()
        if user.is_pro(now):
            return QuotaDecision(allowed=True, remaining=None, limit=self.daily_limit,
                                 is_pro=True, pro_until=user.pro_until)
        try:
            used = await self.quotas.get_used(user.tg_user_id, day_key(now))
        except PersistenceError as e:
            log.warning("quota read failed", user_id=user.tg_user_id, error=str(e))
            return QuotaDecision(allowed=self.fail_open, remaining=None,
                                 limit=self.daily_limit, degraded=True)
        remaining = max(0, self.daily_limit - used)
        return QuotaDecision(allowed=remaining > 0, remaining=remaining, limit=self.daily_limit)

    def _degraded(self, user_id: int, error: Exception) -> QuotaDecision:
        log.warning(
            "quota storage unavailable",
            user_id=user_id,
            fail_open=self.fail_open,
            error=str(error),
        )
        return QuotaDecision(allowed=self.fail_open, remaining=None,
                             limit=self.daily_limit, degraded=True)

    async def _remember_left(self, user_id: int, left: int) -> None:
        if self.users is None:
            return
        try:
            await self.users.set_free_checks_left(user_id, left)
        except PersistenceError as e:
            log.warning("free_checks_left update failed", user_id=user_id, error=str(e))
