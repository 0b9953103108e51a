# -*- coding: utf-8 -*-
"""
Unified provider interface for company data sources
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.logger import get_logger
from utils.security import redact_api_keys

log = get_logger(__name__)


@dataclass(frozen=True)
class Success:
    provider: str
    payload: Dict[str, Any]


@dataclass(frozen=True)
class NotConfigured:
    provider: str
    reason: str


@dataclass(frozen=True)
class UpstreamError:
    provider: str
    status_code: int
    body: str


@dataclass(frozen=True)
class NetworkError:
    provider: str
    cause: str


LookupResult = Union[Success, NotConfigured, UpstreamError, NetworkError]


class _TemporaryFailure(Exception):
    """Failure worth retrying; carries the typed result to return once retries run out"""

    def __init__(self, result: LookupResult):
        super().__init__(str(result))
        self.result = result


class CompanyProvider(ABC):
    """
    Abstract base class for company data providers
    """

    name: str = "provider"

    @abstractmethod
    async def lookup(self, inn: str) -> LookupResult:
        """
        Get raw company data by INN

        Args:
            inn: 10 or 12 digits, already validated by the caller

        Returns:
            Typed outcome; HTTP errors are classified, never raised
        """

    async def aclose(self) -> None:
        pass


class HttpCompanyProvider(CompanyProvider):
    """
    Base for HTTP JSON providers: timeout, bounded retries with exponential
    backoff on network errors, 429 and 5xx; everything else is classified once.
    """

    def __init__(self, api_key: str, base_url: str, timeout: float = 10, max_retries: int = 2,
                 backoff: float = 0.5, client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff = backoff
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def lookup(self, inn: str) -> LookupResult:
        if not self.api_key:
            return NotConfigured(self.name, f"{self.name.upper()} API key is not set")

        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff, min=self.backoff, max=self.backoff * 4),
            retry=retry_if_exception_type(_TemporaryFailure),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._attempt(inn)
        except _TemporaryFailure as e:
            log.warning("provider gave up", provider=self.name, inn=inn, result=str(e.result))
            return e.result

    async def _attempt(self, inn: str) -> LookupResult:
        try:
            response = await self._send(inn)
        except httpx.RequestError as e:
            log.error("provider network error", provider=self.name, inn=inn, error=repr(e))
            raise _TemporaryFailure(NetworkError(self.name, repr(e))) from e

        status = response.status_code
        body_preview = response.text[:500] if response.content else ""
        log.info("provider response", provider=self.name, inn=inn, status=status,
                 bytes=len(response.content or b""))

        if status == 429 or status >= 500:
            raise _TemporaryFailure(UpstreamError(self.name, status, body_preview))
        if status >= 400:
            return UpstreamError(self.name, status, body_preview)

        try:
            data = response.json()
        except ValueError:
            return UpstreamError(self.name, status, f"non-JSON body: {body_preview}")
        if not isinstance(data, dict):
            return UpstreamError(self.name, status, f"unexpected JSON type: {type(data).__name__}")
        return self._classify(status, data)

    def _log_request(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> None:
        log.info("provider request", provider=self.name, method=method, url=url,
                 params=redact_api_keys(params or {}))

    @abstractmethod
    async def _send(self, inn: str) -> httpx.Response:
        """Performs one HTTP request"""

    def _classify(self, status: int, data: Dict[str, Any]) -> LookupResult:
        return Success(self.name, data)
