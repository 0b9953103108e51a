# -*- coding: utf-8 -*-
"""
Репозитории поверх SQLAlchemy: пользователи, дневные квоты, кэш, журнал проверок.

Все изменения счётчиков и upsert'ы выполняются одним SQL-выражением
(INSERT ... ON CONFLICT DO UPDATE), без пары "прочитать, затем записать".
Ошибки SQLAlchemy заворачиваются в PersistenceError.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from core.errors import PersistenceError
from domain.models import UserIdentity, UserProfile, utcnow
from services.database import BotUser, CheckLog, DailyQuota, DatabaseService, InnCache


class _Repository:
    def __init__(self, db: DatabaseService):
        self.db = db

    def _insert(self, table):
        """INSERT с поддержкой ON CONFLICT для текущего диалекта"""
        if self.db.dialect == "postgresql":
            return postgresql.insert(table)
        return sqlite.insert(table)


class UserRepository(_Repository):

    async def upsert(self, identity: UserIdentity) -> UserProfile:
        """Создаёт пользователя или обновляет имя; план и срок PRO не трогает"""
        now = utcnow()
        table = BotUser.__table__
        stmt = self._insert(table).values(
            tg_user_id=identity.id,
            username=identity.username,
            first_name=identity.first_name,
            last_name=identity.last_name,
            plan="free",
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.tg_user_id],
            set_={
                "username": stmt.excluded.username,
                "first_name": stmt.excluded.first_name,
                "last_name": stmt.excluded.last_name,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        try:
            async with (await self.db.get_session()) as session:
                await session.execute(stmt)
                await session.commit()
                row = await session.get(BotUser, identity.id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"user upsert failed: {e}") from e
        return _to_profile(row)

    async def get(self, tg_user_id: int) -> Optional[UserProfile]:
        try:
            async with (await self.db.get_session()) as session:
                row = await session.get(BotUser, tg_user_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"user read failed: {e}") from e
        return _to_profile(row) if row else None

    async def set_plan(self, tg_user_id: int, plan: str, pro_until: Optional[datetime] = None) -> None:
        stmt = (
            update(BotUser)
            .where(BotUser.tg_user_id == tg_user_id)
            .values(plan=plan, pro_until=pro_until, updated_at=utcnow())
        )
        try:
            async with (await self.db.get_session()) as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"plan update failed: {e}") from e

    async def set_free_checks_left(self, tg_user_id: int, left: int) -> None:
        stmt = (
            update(BotUser)
            .where(BotUser.tg_user_id == tg_user_id)
            .values(free_checks_left=left)
        )
        try:
            async with (await self.db.get_session()) as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"free checks update failed: {e}") from e


class QuotaRepository(_Repository):

    async def try_increment(self, tg_user_id: int, day: str, limit: int) -> Optional[int]:
        """
        Атомарно увеличивает счётчик дня, если он меньше limit.

        Returns:
            Новое значение счётчика или None, если лимит уже исчерпан
        """
        now = utcnow()
        table = DailyQuota.__table__
        stmt = self._insert(table).values(tg_user_id=tg_user_id, day=day, used=1, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.tg_user_id, table.c.day],
            set_={"used": table.c.used + 1, "updated_at": now},
            where=table.c.used < limit,
        ).returning(table.c.used)
        try:
            async with (await self.db.get_session()) as session:
                result = await session.execute(stmt)
                used = result.scalar_one_or_none()
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"quota increment failed: {e}") from e
        return used

    async def decrement(self, tg_user_id: int, day: str) -> None:
        """Атомарно возвращает одну проверку (не ниже нуля)"""
        table = DailyQuota.__table__
        stmt = (
            update(table)
            .where(table.c.tg_user_id == tg_user_id, table.c.day == day, table.c.used > 0)
            .values(used=table.c.used - 1, updated_at=utcnow())
        )
        try:
            async with (await self.db.get_session()) as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"quota decrement failed: {e}") from e

    async def get_used(self, tg_user_id: int, day: str) -> int:
        stmt = select(DailyQuota.used).where(DailyQuota.tg_user_id == tg_user_id, DailyQuota.day == day)
        try:
            async with (await self.db.get_session()) as session:
                result = await session.execute(stmt)
                used = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"quota read failed: {e}") from e
        return used or 0


class CacheRepository(_Repository):

    async def get(self, inn: str) -> Optional[InnCache]:
        try:
            async with (await self.db.get_session()) as session:
                return await session.get(InnCache, inn)
        except SQLAlchemyError as e:
            raise PersistenceError(f"cache read failed: {e}") from e

    async def upsert(self, inn: str, provider: str, raw: Dict[str, Any],
                     record: Optional[Dict[str, Any]], summary: Optional[Dict[str, Any]],
                     fetched_at: datetime) -> None:
        table = InnCache.__table__
        stmt = self._insert(table).values(
            inn=inn, provider=provider, raw=raw, record=record, summary=summary, fetched_at=fetched_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.inn],
            set_={
                "provider": stmt.excluded.provider,
                "raw": stmt.excluded.raw,
                "record": stmt.excluded.record,
                "summary": stmt.excluded.summary,
                "fetched_at": stmt.excluded.fetched_at,
            },
        )
        try:
            async with (await self.db.get_session()) as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"cache upsert failed: {e}") from e


class CheckLogRepository(_Repository):

    async def add(self, tg_user_id: int, inn: str, provider: Optional[str], outcome: str,
                  summary: Optional[str] = None, ai_summary: Optional[Dict[str, Any]] = None) -> int:
        try:
            async with (await self.db.get_session()) as session:
                entry = CheckLog(
                    tg_user_id=tg_user_id,
                    inn=inn,
                    provider=provider,
                    outcome=outcome,
                    summary=summary,
                    ai_summary=ai_summary,
                    created_at=utcnow(),
                )
                session.add(entry)
                await session.commit()
                return entry.id
        except SQLAlchemyError as e:
            raise PersistenceError(f"check log insert failed: {e}") from e

    async def count(self, inn: Optional[str] = None) -> int:
        stmt = select(func.count(CheckLog.id))
        if inn is not None:
            stmt = stmt.where(CheckLog.inn == inn)
        try:
            async with (await self.db.get_session()) as session:
                result = await session.execute(stmt)
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"check log count failed: {e}") from e


def _to_profile(row: BotUser) -> UserProfile:
    return UserProfile(
        tg_user_id=row.tg_user_id,
        username=row.username,
        first_name=row.first_name,
        last_name=row.last_name,
        plan=row.plan if row.plan in ("free", "pro") else "free",
        pro_until=row.pro_until,
        free_checks_left=row.free_checks_left,
    )
