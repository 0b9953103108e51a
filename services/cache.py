# -*- coding: utf-8 -*-
"""
Кэш результатов провайдеров по ИНН
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ValidationError

from core.errors import PersistenceError
from core.logger import get_logger
from domain.models import CacheEntry, CompanyRecord, Summary, naive_utc, utcnow
from domain.repository import CacheRepository

log = get_logger(__name__)


class CacheConfig(BaseModel):
    """Конфигурация кэша"""
    ttl_hours: int = 24


class ResultCache:
    """Сервис кэширования: просроченные записи не отдаются, но и не удаляются"""

    def __init__(self, repository: CacheRepository, config: CacheConfig,
                 clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.config = config
        self.clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.config.ttl_hours)

    async def get(self, inn: str) -> Optional[CacheEntry]:
        """Получает запись из кэша; ошибки хранилища считаются промахом"""
        try:
            row = await self.repository.get(inn)
        except PersistenceError as e:
            log.error("Cache get failed", inn=inn, error=str(e))
            return None

        if row is None:
            return None

        # Проверяем, не истек ли TTL
        if self.clock() - naive_utc(row.fetched_at) > self.ttl:
            log.debug("Cache entry expired", inn=inn, fetched_at=row.fetched_at.isoformat())
            return None

        try:
            return CacheEntry(
                inn=row.inn,
                provider=row.provider,
                payload=row.raw or {},
                record=CompanyRecord.model_validate(row.record) if row.record else None,
                summary=Summary.model_validate(row.summary) if row.summary else None,
                fetched_at=row.fetched_at,
            )
        except ValidationError as e:
            log.warning("Cache entry is malformed", inn=inn, error=str(e))
            return None

    async def put(self, inn: str, provider: str, payload: Dict[str, Any],
                  record: Optional[CompanyRecord] = None, summary: Optional[Summary] = None) -> bool:
        """Сохраняет ответ провайдера (перезапись, побеждает последняя запись)"""
        try:
            await self.repository.upsert(
                inn=inn,
                provider=provider,
                raw=payload,
                record=record.model_dump() if record else None,
                summary=summary.model_dump() if summary and summary.available else None,
                fetched_at=self.clock(),
            )
        except PersistenceError as e:
            log.error("Cache set failed", inn=inn, error=str(e))
            return False
        return True
