# -*- coding: utf-8 -*-
"""
Сквозные тесты пайплайна проверки: SQLite в tmp_path, провайдеры - заглушки/MockTransport
"""
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy import select

from core.errors import UpstreamUnavailable
from domain.models import OutcomeStatus, Summary, utcnow
from services.cache import CacheConfig, ResultCache
from services.database import CheckLog
from services.pipeline import CheckPipeline
from services.providers.base import CompanyProvider, Success
from services.providers.chain import ProviderChain
from services.providers.dadata import DaDataProvider
from services.quota import QuotaLedger, day_key

INN = "7707083893"


class StubProvider(CompanyProvider):
    name = "stub"

    def __init__(self, payload):
        self.payload = payload
        self.calls = 0

    async def lookup(self, inn):
        self.calls += 1
        return Success(self.name, self.payload)


@pytest.fixture
def make_pipeline(users, quotas, cache_repo, check_log):
    def factory(provider, limit=3, enable_pdf=False, summarizer=None):
        return CheckPipeline(
            users,
            QuotaLedger(quotas, users, daily_limit=limit),
            ResultCache(cache_repo, CacheConfig(ttl_hours=24)),
            ProviderChain([provider]),
            summarizer,
            check_log,
            enable_pdf=enable_pdf,
        )
    return factory


async def used_today(quotas, identity):
    return await quotas.get_used(identity.id, day_key(utcnow()))


class TestCheckPipeline:

    async def test_success_end_to_end(self, make_pipeline, identity, cache_repo, check_log, quotas):
        provider = StubProvider({"name": "ООО Ромашка", "status": "ACTIVE"})
        pipeline = make_pipeline(provider)

        outcome = await pipeline.run(identity, INN)

        assert outcome.status == OutcomeStatus.OK
        assert "ООО Ромашка" in outcome.text
        assert "ACTIVE" in outcome.text
        assert outcome.provider == "stub"
        assert not outcome.from_cache
        assert outcome.quota.remaining == 2
        assert await cache_repo.get(INN) is not None
        assert await check_log.count(INN) == 1
        assert await used_today(quotas, identity) == 1

    async def test_cache_hit_still_counts(self, make_pipeline, identity, check_log, quotas):
        provider = StubProvider({"name": "ООО Ромашка"})
        pipeline = make_pipeline(provider)

        await pipeline.run(identity, INN)
        outcome = await pipeline.run(identity, f"  {INN} ")

        assert outcome.status == OutcomeStatus.OK
        assert outcome.from_cache
        assert provider.calls == 1
        assert outcome.quota.remaining == 1
        assert await check_log.count(INN) == 2
        assert await used_today(quotas, identity) == 2

    async def test_invalid_tax_id_consumes_nothing(self, make_pipeline, identity, check_log, quotas):
        provider = StubProvider({"name": "X"})
        pipeline = make_pipeline(provider)

        outcome = await pipeline.run(identity, "12345")

        assert outcome.status == OutcomeStatus.INVALID
        assert "Некорректный ИНН" in outcome.text
        assert provider.calls == 0
        assert await used_today(quotas, identity) == 0
        assert await check_log.count() == 0

    async def test_quota_exceeded(self, make_pipeline, identity, check_log):
        provider = StubProvider({"name": "ООО Ромашка"})
        pipeline = make_pipeline(provider, limit=1)

        assert (await pipeline.run(identity, INN)).status == OutcomeStatus.OK
        outcome = await pipeline.run(identity, INN)

        assert outcome.status == OutcomeStatus.QUOTA_EXCEEDED
        assert "(1 в день)" in outcome.text
        assert provider.calls == 1
        assert await check_log.count(INN) == 2

    async def test_not_found_is_refunded_and_not_cached(self, make_pipeline, identity, cache_repo, quotas):
        pipeline = make_pipeline(StubProvider({"suggestions": []}))

        outcome = await pipeline.run(identity, INN)

        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert outcome.quota.remaining == 3
        assert await cache_repo.get(INN) is None
        assert await used_today(quotas, identity) == 0

    async def test_not_configured(self, make_pipeline, identity, quotas):
        pipeline = make_pipeline(DaDataProvider("", "https://dadata.test/rs"))

        outcome = await pipeline.run(identity, INN)

        assert outcome.status == OutcomeStatus.NOT_CONFIGURED
        assert await used_today(quotas, identity) == 0

    async def test_http_500_refunded_then_charged_once(self, make_pipeline, identity, cache_repo, quotas):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) <= 3:
                return httpx.Response(500, text="oops")
            return httpx.Response(200, json={"suggestions": [{"data": {
                "inn": INN, "name": {"short_with_opf": "ПАО СБЕРБАНК"}, "state": {"status": "ACTIVE"},
            }}]})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = DaDataProvider("secret", "https://dadata.test/rs", max_retries=2, backoff=0, client=client)
        pipeline = make_pipeline(provider)

        failed = await pipeline.run(identity, INN)
        assert failed.status == OutcomeStatus.UPSTREAM_ERROR
        assert await used_today(quotas, identity) == 0
        assert await cache_repo.get(INN) is None

        retried = await pipeline.run(identity, INN)
        assert retried.status == OutcomeStatus.OK
        assert "ПАО СБЕРБАНК" in retried.text
        assert retried.quota.remaining == 2
        assert await used_today(quotas, identity) == 1
        await client.aclose()

    async def test_pro_user_is_not_counted(self, make_pipeline, identity, users, quotas):
        await users.upsert(identity)
        await users.set_plan(identity.id, "pro", None)
        pipeline = make_pipeline(StubProvider({"name": "ООО Ромашка"}), limit=1)

        for _ in range(3):
            outcome = await pipeline.run(identity, INN)
            assert outcome.status == OutcomeStatus.OK
            assert outcome.quota.is_pro
        assert "PRO" in outcome.text
        assert await used_today(quotas, identity) == 0

    async def test_summary_cached_with_payload(self, make_pipeline, identity, cache_repo):
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(return_value=Summary(title="Ромашка", bullets=["Действует"],
                                                              risk_level="низкий"))
        pipeline = make_pipeline(StubProvider({"name": "ООО Ромашка"}), summarizer=summarizer)

        first = await pipeline.run(identity, INN)
        second = await pipeline.run(identity, INN)

        assert "Действует" in first.text
        assert "Действует" in second.text
        assert summarizer.summarize.await_count == 1
        assert (await cache_repo.get(INN)).summary["risk_level"] == "низкий"

    async def test_served_summary_kept_in_check_log(self, make_pipeline, identity, db):
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(return_value=Summary(title="Ромашка", bullets=["Действует"],
                                                              risk_level="низкий"))
        pipeline = make_pipeline(StubProvider({"name": "ООО Ромашка"}), summarizer=summarizer)

        await pipeline.run(identity, INN)

        async with (await db.get_session()) as session:
            row = (await session.execute(select(CheckLog).where(CheckLog.inn == INN))).scalar_one()
        assert row.outcome == "ok"
        assert row.summary == "ООО Ромашка"
        assert row.ai_summary["risk_level"] == "низкий"
        assert row.ai_summary["bullets"] == ["Действует"]

    async def test_provider_crash_refunds_and_logs(self, make_pipeline, identity, check_log, quotas, db):
        class CrashingProvider(CompanyProvider):
            name = "crashing"

            async def lookup(self, inn):
                raise RuntimeError("boom")

        pipeline = make_pipeline(CrashingProvider())

        with pytest.raises(UpstreamUnavailable):
            await pipeline.run(identity, INN)

        assert await used_today(quotas, identity) == 0
        assert await check_log.count(INN) == 1
        async with (await db.get_session()) as session:
            row = (await session.execute(select(CheckLog).where(CheckLog.inn == INN))).scalar_one()
        assert row.outcome == "upstream_error"
        assert row.ai_summary is None

    async def test_pdf_attached(self, make_pipeline, identity):
        pipeline = make_pipeline(StubProvider({"name": "ООО Ромашка"}), enable_pdf=True)

        outcome = await pipeline.run(identity, INN)

        assert outcome.document.startswith(b"%PDF")
        assert outcome.document_name == f"proverka_{INN}.pdf"

    async def test_greeting_quota_state(self, make_pipeline, identity):
        pipeline = make_pipeline(StubProvider({"name": "ООО Ромашка"}))
        await pipeline.run(identity, INN)

        state = await pipeline.quota_state(identity)

        assert state.remaining == 2
        assert state.limit == 3
