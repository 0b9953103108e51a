# -*- coding: utf-8 -*-
"""
Опрос нескольких провайдеров.

Режимы:
  fallback - по очереди, до первой карточки;
  race     - одновременно, побеждает первая карточка, остальные запросы отменяются;
  parallel - одновременно, берётся самая полная карточка (ничья - по порядку
             провайдеров), пустые поля дополняются из остальных.
"""
import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from core.errors import ConfigurationMissing
from core.logger import get_logger
from domain.models import CompanyRecord
from services.mappers.company import normalize

from .base import CompanyProvider, LookupResult, NotConfigured, Success
from .checko import CheckoProvider
from .dadata import DaDataProvider

log = get_logger(__name__)

MODES = ("fallback", "race", "parallel")


@dataclass(frozen=True)
class ChainResult:
    result: LookupResult
    record: Optional[CompanyRecord] = None

    @property
    def found(self) -> bool:
        return isinstance(self.result, Success) and self.record is not None


class ProviderChain:
    def __init__(self, providers: Sequence[CompanyProvider], mode: str = "fallback",
                 normalizer: Callable[[dict], Optional[CompanyRecord]] = normalize):
        if mode not in MODES:
            raise ConfigurationMissing(f"Unknown PROVIDER_MODE {mode!r}, expected one of {MODES}")
        self.providers: List[CompanyProvider] = list(providers)
        self.mode = mode
        self.normalizer = normalizer

    async def lookup(self, inn: str) -> ChainResult:
        if not self.providers:
            return ChainResult(NotConfigured("none", "no providers configured"))
        log.info("provider chain lookup", inn=inn, mode=self.mode,
                 providers=[p.name for p in self.providers])
        if self.mode == "race":
            return await self._race(inn)
        if self.mode == "parallel":
            return await self._parallel(inn)
        return await self._fallback(inn)

    async def aclose(self) -> None:
        for provider in self.providers:
            await provider.aclose()

    async def _fallback(self, inn: str) -> ChainResult:
        outcomes: List[ChainResult] = []
        for provider in self.providers:
            outcome = self._resolve(await provider.lookup(inn))
            if outcome.found:
                return outcome
            outcomes.append(outcome)
        return self._failure(outcomes)

    async def _race(self, inn: str) -> ChainResult:
        tasks = [asyncio.create_task(p.lookup(inn)) for p in self.providers]
        outcomes: List[ChainResult] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                outcome = self._resolve(await next_done)
                if outcome.found:
                    return outcome
                outcomes.append(outcome)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
        return self._failure(outcomes)

    async def _parallel(self, inn: str) -> ChainResult:
        results = await asyncio.gather(*(p.lookup(inn) for p in self.providers))
        outcomes = [self._resolve(r) for r in results]
        found = [o for o in outcomes if o.found]
        if not found:
            return self._failure(outcomes)
        # max() keeps the first of equal candidates, i.e. provider order
        best = max(found, key=lambda o: o.record.filled_count())
        record = best.record
        for other in found:
            if other is not best:
                record = record.merged_with(other.record)
        return ChainResult(best.result, record)

    def _resolve(self, result: LookupResult) -> ChainResult:
        if isinstance(result, Success):
            return ChainResult(result, self.normalizer(result.payload))
        return ChainResult(result)

    @staticmethod
    def _failure(outcomes: List[ChainResult]) -> ChainResult:
        """Nothing found: prefer "not found", then a real upstream failure, then NotConfigured"""
        not_found = [o for o in outcomes if isinstance(o.result, Success)]
        if not_found:
            return not_found[0]
        failures = [o for o in outcomes if not isinstance(o.result, NotConfigured)]
        if failures:
            return failures[-1]
        reasons = "; ".join(o.result.reason for o in outcomes)
        provider = outcomes[0].result.provider if len(outcomes) == 1 else "all"
        return ChainResult(NotConfigured(provider, reasons))


def build_provider_chain(settings, client=None) -> ProviderChain:
    """Собирает цепочку провайдеров по PROVIDERS/PROVIDER_MODE"""
    registry = {
        "checko": lambda: CheckoProvider(
            settings.CHECKO_API_KEY, settings.CHECKO_API, timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES, backoff=settings.RETRY_BACKOFF, client=client,
        ),
        "dadata": lambda: DaDataProvider(
            settings.DADATA_API_KEY, settings.DADATA_API, timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES, backoff=settings.RETRY_BACKOFF, client=client,
        ),
    }
    providers = []
    for name in settings.provider_names:
        factory = registry.get(name)
        if factory is None:
            log.warning("unknown provider skipped", provider=name)
            continue
        provider = factory()
        if not provider.api_key:
            log.warning("provider is not configured", provider=name)
        providers.append(provider)
    return ProviderChain(providers, mode=settings.PROVIDER_MODE)
