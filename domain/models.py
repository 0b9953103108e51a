# -*- coding: utf-8 -*-
"""
Доменные модели проверки контрагента
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class UserIdentity(BaseModel):
    """Пользователь Telegram, как он пришёл в апдейте"""
    id: int = Field(..., description="Telegram user id")
    username: Optional[str] = Field(None, description="@username")
    first_name: Optional[str] = Field(None, description="Имя")
    last_name: Optional[str] = Field(None, description="Фамилия")


class UserProfile(BaseModel):
    """Пользователь бота, как он хранится в БД"""
    tg_user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    plan: Literal["free", "pro"] = "free"
    pro_until: Optional[datetime] = None
    free_checks_left: Optional[int] = None

    def is_pro(self, now: datetime) -> bool:
        """PRO тогда и только тогда, когда план pro и срок не истёк (или не задан)"""
        if self.plan != "pro":
            return False
        if self.pro_until is None:
            return True
        return naive_utc(self.pro_until) > naive_utc(now)


class CompanyRecord(BaseModel):
    """Каноническая карточка компании. Любое поле может отсутствовать."""
    name: Optional[str] = Field(None, description="Наименование")
    inn: Optional[str] = Field(None, description="ИНН")
    ogrn: Optional[str] = Field(None, description="ОГРН / ОГРНИП")
    kpp: Optional[str] = Field(None, description="КПП")
    status: Optional[str] = Field(None, description="Статус")
    address: Optional[str] = Field(None, description="Адрес")
    manager: Optional[str] = Field(None, description="Руководитель")
    okved: Optional[str] = Field(None, description="Основной ОКВЭД")

    def filled_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)

    def merged_with(self, other: "CompanyRecord") -> "CompanyRecord":
        """Заполняет пустые поля значениями из other; заполненные не трогает"""
        mine = self.model_dump()
        theirs = other.model_dump()
        return CompanyRecord(**{k: mine[k] or theirs.get(k) for k in mine})


class QuotaDecision(BaseModel):
    """Результат проверки квоты"""
    allowed: bool
    remaining: Optional[int] = Field(None, description="None - безлимит (PRO) или неизвестно")
    limit: int = 0
    is_pro: bool = False
    pro_until: Optional[datetime] = None
    degraded: bool = Field(False, description="Хранилище квот недоступно, решение принято по политике")
    day: Optional[str] = Field(None, description="День резервирования (UTC), с него же снимается возврат")


class Summary(BaseModel):
    """Сводка от LLM"""
    available: bool = True
    title: Optional[str] = None
    bullets: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
    risk_level: Optional[str] = None
    note: Optional[str] = None


SUMMARY_UNAVAILABLE = Summary(available=False)


class CacheEntry(BaseModel):
    """Запись кэша по ИНН"""
    inn: str
    provider: str
    payload: Dict[str, Any]
    record: Optional[CompanyRecord] = None
    summary: Optional[Summary] = None
    fetched_at: datetime


class OutcomeStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"
    NOT_CONFIGURED = "not_configured"
    UPSTREAM_ERROR = "upstream_error"


class CheckOutcome(BaseModel):
    """Что пайплайн вернул боту: текст ответа и, возможно, PDF"""
    status: OutcomeStatus
    text: str
    inn: Optional[str] = None
    provider: Optional[str] = None
    record: Optional[CompanyRecord] = None
    quota: Optional[QuotaDecision] = None
    from_cache: bool = False
    document: Optional[bytes] = None
    document_name: Optional[str] = None


def naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (так же хранится в БД)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
