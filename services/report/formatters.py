# -*- coding: utf-8 -*-
"""
Форматирование ответов бота (HTML parse mode).

Любая строка из внешнего источника (ответ провайдера, LLM, профиль пользователя)
проходит через h() перед вставкой в разметку.
"""
import html
from datetime import datetime
from typing import Any, List, Optional

from domain.models import CompanyRecord, QuotaDecision, Summary

DISCLAIMER = "<i>Отчёт информационный, для внутренней проверки. Не документ ФНС.</i>"

# Порядок и подписи полей карточки
FIELD_LABELS = (
    ("name", "Наименование"),
    ("inn", "ИНН"),
    ("ogrn", "ОГРН"),
    ("kpp", "КПП"),
    ("status", "Статус"),
    ("address", "Адрес"),
    ("manager", "Руководитель"),
    ("okved", "ОКВЭД"),
)

MAX_BULLETS = 12
MAX_RED_FLAGS = 10


def h(value: Any) -> str:
    """HTML-escape a dynamic value for safe use in HTML parse-mode messages."""
    if value is None:
        return "—"
    return html.escape(str(value), quote=False)


def format_date(value: Optional[datetime]) -> str:
    """datetime -> DD.MM.YYYY"""
    if value is None:
        return "—"
    return value.strftime("%d.%m.%Y")


def render_quota_line(quota: Optional[QuotaDecision]) -> str:
    if quota is None:
        return ""
    if quota.is_pro:
        if quota.pro_until:
            return f"💎 PRO до {format_date(quota.pro_until)}"
        return "💎 PRO без ограничения срока"
    if quota.remaining is None:
        return ""
    return f"Осталось бесплатных проверок сегодня: <b>{quota.remaining}</b> из {quota.limit}"


def render_company(inn: str, record: CompanyRecord, quota: Optional[QuotaDecision] = None,
                   summary: Optional[Summary] = None) -> str:
    """Карточка компании + сводка + остаток квоты"""
    title = summary.title if summary is not None and summary.available and summary.title else None
    lines: List[str] = [f"<b>{h(title or f'Результат по ИНН {inn}')}</b>", ""]

    for field, label in FIELD_LABELS:
        value = getattr(record, field)
        if value:
            lines.append(f"<b>{label}:</b> {h(value)}")

    if summary is not None and summary.available:
        lines.extend(_render_summary(summary))

    quota_line = render_quota_line(quota)
    if quota_line:
        lines.extend(["", quota_line])

    lines.extend(["", DISCLAIMER])
    return "\n".join(lines)


def _render_summary(summary: Summary) -> List[str]:
    lines: List[str] = [""]
    if summary.risk_level:
        lines.append(f"<b>Уровень риска:</b> {h(summary.risk_level)}")
    if summary.bullets:
        lines.append("<b>Сводка:</b>")
        lines.extend(f"• {h(b)}" for b in summary.bullets[:MAX_BULLETS])
    if summary.red_flags:
        lines.append("<b>Красные флаги:</b>")
        lines.extend(f"• {h(f)}" for f in summary.red_flags[:MAX_RED_FLAGS])
    if summary.note:
        lines.append(f"<i>{h(summary.note)}</i>")
    return lines if len(lines) > 1 else []


def render_checking(inn: str) -> str:
    return f"🔎 Проверяю ИНН <b>{h(inn)}</b>…"


def render_invalid_tax_id() -> str:
    return (
        "❌ <b>Некорректный ИНН</b>\n\n"
        "ИНН организации - 10 цифр, ИНН ИП или физлица - 12 цифр.\n"
        "Пришлите его одним сообщением, например: <code>7707083893</code>"
    )


def render_quota_exceeded(limit: int) -> str:
    return (
        "⛔️ Лимит бесплатных проверок на сегодня исчерпан "
        f"({limit} в день).\n\n"
        "💎 В PRO - безлимит проверок, AI-сводка и PDF-отчёт."
    )


def render_not_found(inn: str) -> str:
    return f"🤷 Компания с ИНН <b>{h(inn)}</b> не найдена в источниках данных."


def render_upstream_error() -> str:
    return "⚠️ Источник данных сейчас недоступен. Попробуйте ещё раз через пару минут."


def render_not_configured() -> str:
    return "⚙️ Источники данных не подключены. Проверка временно недоступна."


def render_usage_hint() -> str:
    return "Пришлите ИНН (10 или 12 цифр). Или нажмите кнопку меню 👇"


def render_internal_error() -> str:
    return "😵 Что-то пошло не так. Попробуйте ещё раз чуть позже."
