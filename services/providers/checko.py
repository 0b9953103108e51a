# -*- coding: utf-8 -*-
"""
Провайдер Checko (api.checko.ru)

    GET /v2/company?key=...&inn=...        - организации (10 цифр)
    GET /v2/entrepreneur?key=...&inn=...   - ИП (12 цифр)

Ответ: {"data": {...}, "meta": {"status": "ok", ...}}. Ошибки тарифа/ключа
приходят с кодом 200 и meta.status == "error" (или объектом error).
"""
from typing import Any, Dict

import httpx

from .base import HttpCompanyProvider, LookupResult, Success, UpstreamError


class CheckoProvider(HttpCompanyProvider):
    """Провайдер для работы с Checko API"""

    name = "checko"

    async def _send(self, inn: str) -> httpx.Response:
        path = "/entrepreneur" if len(inn) == 12 else "/company"
        url = f"{self.base_url}{path}"
        params = {"key": self.api_key, "inn": inn}
        self._log_request("GET", url, params)
        return await self.client.get(url, params=params)

    def _classify(self, status: int, data: Dict[str, Any]) -> LookupResult:
        meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
        error = data.get("error")
        if error or meta.get("status") == "error":
            message = meta.get("message") or error
            return UpstreamError(self.name, status, str(message)[:500])
        return Success(self.name, data)
