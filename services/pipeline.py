# -*- coding: utf-8 -*-
"""
Пайплайн проверки ИНН.

validate -> пользователь -> квота -> кэш -> провайдеры -> кэш -> сводка ->
сообщение -> PDF -> журнал.
"""
from typing import Optional

from core.errors import PersistenceError, UpstreamUnavailable
from core.logger import get_logger
from domain.models import (
    CheckOutcome,
    CompanyRecord,
    OutcomeStatus,
    QuotaDecision,
    Summary,
    UserIdentity,
    UserProfile,
)
from domain.repository import CacheRepository, CheckLogRepository, QuotaRepository, UserRepository
from reports.pdf import build_check_pdf
from services.cache import CacheConfig, ResultCache
from services.enrichment import Summarizer
from services.mappers.company import normalize
from services.providers.base import NotConfigured, Success
from services.providers.chain import ChainResult, ProviderChain
from services.quota import QuotaLedger
from services.report import formatters
from utils.validators import parse_tax_id

log = get_logger(__name__)


class CheckPipeline:
    """Один запрос пользователя - одна проверка"""

    def __init__(self, users: UserRepository, ledger: QuotaLedger, cache: ResultCache,
                 chain: ProviderChain, summarizer: Optional[Summarizer] = None,
                 check_log: Optional[CheckLogRepository] = None, *, enable_pdf: bool = True,
                 brand: str = "ProverkaBiz", watermark: str = ""):
        self.users = users
        self.ledger = ledger
        self.cache = cache
        self.chain = chain
        self.summarizer = summarizer or Summarizer()
        self.check_log = check_log
        self.enable_pdf = enable_pdf
        self.brand = brand
        self.watermark = watermark

    @property
    def daily_limit(self) -> int:
        return self.ledger.daily_limit

    async def register_user(self, identity: UserIdentity) -> UserProfile:
        """Upsert пользователя; при сбое БД работаем с профилем по умолчанию"""
        try:
            return await self.users.upsert(identity)
        except PersistenceError as e:
            log.warning("user upsert failed, using default profile", user_id=identity.id, error=str(e))
            return UserProfile(
                tg_user_id=identity.id,
                username=identity.username,
                first_name=identity.first_name,
                last_name=identity.last_name,
            )

    async def quota_state(self, identity: UserIdentity) -> QuotaDecision:
        user = await self.register_user(identity)
        return await self.ledger.remaining(user)

    async def run(self, identity: UserIdentity, text: Optional[str]) -> CheckOutcome:
        inn = parse_tax_id(text)
        if inn is None:
            log.info("invalid tax id", user_id=identity.id)
            return CheckOutcome(status=OutcomeStatus.INVALID, text=formatters.render_invalid_tax_id())

        user = await self.register_user(identity)
        quota = await self.ledger.check_and_reserve(user)
        if not quota.allowed:
            await self._log_check(user, inn, None, OutcomeStatus.QUOTA_EXCEEDED)
            return CheckOutcome(
                status=OutcomeStatus.QUOTA_EXCEEDED,
                text=formatters.render_quota_exceeded(quota.limit),
                inn=inn,
                quota=quota,
            )

        try:
            return await self._serve(user, inn, quota)
        except Exception as e:
            quota = await self.ledger.release(quota, user)
            log.exception("check crashed", inn=inn, user_id=user.tg_user_id, error=str(e))
            await self._log_check(user, inn, None, OutcomeStatus.UPSTREAM_ERROR)
            raise UpstreamUnavailable(f"check for {inn} failed: {e}") from e

    async def _serve(self, user: UserProfile, inn: str, quota: QuotaDecision) -> CheckOutcome:
        entry = await self.cache.get(inn)
        record = None
        if entry is not None:
            record = entry.record or normalize(entry.payload)

        if record is not None:
            log.info("cache hit", inn=inn, provider=entry.provider, user_id=user.tg_user_id)
            provider, payload, summary, from_cache = entry.provider, entry.payload, entry.summary, True
            if summary is None:
                summary = await self.summarizer.summarize(inn, record, payload)
        else:
            found = await self.chain.lookup(inn)
            if not found.found:
                return await self._failed(user, inn, quota, found)
            provider, payload, record, from_cache = found.result.provider, found.result.payload, found.record, False
            summary = await self.summarizer.summarize(inn, record, payload)
            await self.cache.put(inn, provider, payload, record, summary)

        outcome = CheckOutcome(
            status=OutcomeStatus.OK,
            text=formatters.render_company(inn, record, quota, summary),
            inn=inn,
            provider=provider,
            record=record,
            quota=quota,
            from_cache=from_cache,
        )
        if self.enable_pdf:
            outcome.document = self._build_pdf(inn, record, summary, payload, provider)
            if outcome.document:
                outcome.document_name = f"proverka_{inn}.pdf"

        log.info("check done", inn=inn, provider=provider, user_id=user.tg_user_id,
                 from_cache=from_cache, remaining=quota.remaining)
        await self._log_check(user, inn, provider, OutcomeStatus.OK, record.name, summary)
        return outcome

    async def _failed(self, user: UserProfile, inn: str, quota: QuotaDecision,
                      found: ChainResult) -> CheckOutcome:
        """Карточку получить не удалось: возвращаем проверку и объясняем почему"""
        result = found.result
        quota = await self.ledger.release(quota, user)
        if isinstance(result, Success):
            status, text = OutcomeStatus.NOT_FOUND, formatters.render_not_found(inn)
        elif isinstance(result, NotConfigured):
            status, text = OutcomeStatus.NOT_CONFIGURED, formatters.render_not_configured()
        else:
            status, text = OutcomeStatus.UPSTREAM_ERROR, formatters.render_upstream_error()
        log.warning("check failed", inn=inn, provider=result.provider, status=status.value,
                    user_id=user.tg_user_id)
        await self._log_check(user, inn, result.provider, status)
        return CheckOutcome(status=status, text=text, inn=inn, provider=result.provider, quota=quota)

    def _build_pdf(self, inn: str, record: CompanyRecord, summary: Optional[Summary],
                   payload: dict, provider: str) -> Optional[bytes]:
        try:
            return build_check_pdf(inn, record, summary, payload, brand=self.brand,
                                   watermark=self.watermark, provider=provider)
        except Exception as e:
            log.exception("PDF generation failed", inn=inn, error=str(e))
            return None

    async def _log_check(self, user: UserProfile, inn: str, provider: Optional[str],
                         status: OutcomeStatus, title: Optional[str] = None,
                         summary: Optional[Summary] = None) -> None:
        if self.check_log is None:
            return
        try:
            ai_summary = summary.model_dump() if summary is not None and summary.available else None
            await self.check_log.add(user.tg_user_id, inn, provider, status.value, title, ai_summary)
        except PersistenceError as e:
            log.error("check log write failed", inn=inn, user_id=user.tg_user_id, error=str(e))


def build_pipeline(settings, db, chain: ProviderChain, summarizer: Optional[Summarizer] = None) -> CheckPipeline:
    """Собирает пайплайн поверх DatabaseService"""
    users = UserRepository(db)
    ledger = QuotaLedger(QuotaRepository(db), users, settings.FREE_DAILY_LIMIT,
                         fail_open=settings.QUOTA_FAIL_OPEN)
    cache = ResultCache(CacheRepository(db), CacheConfig(ttl_hours=settings.CACHE_TTL_HOURS))
    return CheckPipeline(
        users, ledger, cache, chain, summarizer, CheckLogRepository(db),
        enable_pdf=settings.ENABLE_PDF,
        brand=settings.REPORT_BRAND,
        watermark=settings.REPORT_WATERMARK,
    )
