# -*- coding: utf-8 -*-
"""
Необязательная AI-сводка по карточке компании.

Отключённый или сломавшийся LLM возвращает SUMMARY_UNAVAILABLE и никак
не влияет на ход проверки.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from core.logger import get_logger
from domain.models import SUMMARY_UNAVAILABLE, CompanyRecord, Summary

log = get_logger(__name__)

RAW_PREVIEW_CHARS = 6000
RISK_LEVELS = ("низкий", "средний", "высокий", "неопределён")

SYSTEM_PROMPT = f"""\
Ты - риск-аналитик по контрагентам РФ. Из сырых данных API сформируй краткую
и практичную сводку для бухгалтера/юриста. Без выдумок: если данных нет, не пиши о них.
Ответ строго в JSON с ключами:
- title: строка, заголовок сводки;
- bullets: массив строк, ключевые факты (не более 8);
- red_flags: массив строк, настораживающие признаки (может быть пустым);
- risk_level: одно из {", ".join(RISK_LEVELS)};
- note: строка, оговорки.
"""


class Summarizer:
    """Отключённый режим: сводки нет"""

    enabled = False

    async def summarize(self, inn: str, record: CompanyRecord,
                        payload: Optional[Dict[str, Any]] = None) -> Summary:
        return SUMMARY_UNAVAILABLE

    async def aclose(self) -> None:
        pass


class OpenAISummarizer(Summarizer):
    """Сводка через OpenAI Chat Completions с JSON-ответом"""

    enabled = True

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini"):
        self.client = client
        self.model = model

    def build_user_prompt(self, inn: str, record: CompanyRecord,
                          payload: Optional[Dict[str, Any]]) -> str:
        raw = json.dumps(payload or {}, ensure_ascii=False, default=str)[:RAW_PREVIEW_CHARS]
        card = json.dumps(record.model_dump(exclude_none=True), ensure_ascii=False)
        return f"ИНН: {inn}\nКарточка: {card}\nСырые данные (JSON, фрагмент):\n{raw}"

    async def summarize(self, inn: str, record: CompanyRecord,
                        payload: Optional[Dict[str, Any]] = None) -> Summary:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_user_prompt(inn, record, payload)},
                ],
                response_format={"type": "json_object"},
                temperature=0.2,
                max_tokens=700,
            )
        except OpenAIError as e:
            log.error("OpenAI summary failed", inn=inn, error=str(e))
            return SUMMARY_UNAVAILABLE

        content = response.choices[0].message.content if response.choices else None
        if not content:
            log.warning("OpenAI returned empty summary", inn=inn)
            return SUMMARY_UNAVAILABLE
        try:
            summary = Summary.model_validate_json(content)
        except ValidationError as e:
            log.warning("OpenAI returned malformed summary", inn=inn, error=str(e),
                        preview=content[:300])
            return SUMMARY_UNAVAILABLE
        if summary.risk_level not in RISK_LEVELS:
            summary = summary.model_copy(update={"risk_level": "неопределён"})
        return summary.model_copy(update={"available": True})

    async def aclose(self) -> None:
        await self.client.close()


def build_summarizer(settings) -> Summarizer:
    if not settings.OPENAI_API_KEY:
        log.info("OPENAI_API_KEY not set - AI summary disabled")
        return Summarizer()
    client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.LLM_TIMEOUT, max_retries=1)
    log.info("OpenAI summarizer enabled", model=settings.OPENAI_MODEL)
    return OpenAISummarizer(client, model=settings.OPENAI_MODEL)
