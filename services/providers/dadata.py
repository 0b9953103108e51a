# -*- coding: utf-8 -*-
"""
Провайдер DaData для получения информации о компаниях
"""
import httpx

from .base import HttpCompanyProvider


class DaDataProvider(HttpCompanyProvider):
    """
    Провайдер для работы с DaData API.

    POST {base}/findById/party {"query": inn} -> {"suggestions": [{"value": ..., "data": {...}}]}.
    Пустой список suggestions - это успешный ответ "не найдено".
    """

    name = "dadata"

    async def _send(self, inn: str) -> httpx.Response:
        url = f"{self.base_url}/findById/party"
        self._log_request("POST", url)
        return await self.client.post(
            url,
            json={"query": inn, "count": 1},
            headers={
                "Authorization": f"Token {self.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
