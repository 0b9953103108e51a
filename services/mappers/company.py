# services/mappers/company.py
"""
Приведение ответов провайдеров к CompanyRecord.

Провайдеры расходятся в именах и вложенности полей, поэтому разбор задан
таблицами: сначала ищется корень карточки (ROOT_CANDIDATES), затем для
каждого поля перебираются пути из FIELD_RULES; побеждает первое непустое
скалярное значение. Новый провайдер - это новые строки в таблицах.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from domain.models import CompanyRecord

# Где лежит сама карточка компании
ROOT_CANDIDATES: Tuple[str, ...] = (
    "suggestions.0.data",  # DaData findById/party
    "data",                # Checko
    "",                    # плоский JSON
)

FIELD_RULES: Dict[str, Tuple[str, ...]] = {
    "name": (
        "name.short_with_opf",  # DaData
        "name.full_with_opf",
        "НаимСокр",             # Checko
        "НаимПолн",
        "ФИО",                  # Checko, ИП
        "name.short",
        "name.full",
        "company_name",
        "name",
    ),
    "inn": ("inn", "ИНН"),
    "ogrn": ("ogrn", "ОГРН", "ОГРНИП", "OGRN"),
    "kpp": ("kpp", "КПП", "KPP"),
    "status": (
        "state.status",  # DaData: ACTIVE | LIQUIDATING | LIQUIDATED ...
        "Статус.Наим",   # Checko
        "status.name",
        "status",
        "state",
    ),
    "address": (
        "address.value",
        "address.unrestricted_value",
        "ЮрАдрес.АдресРФ",
        "address",
        "addresses.legal",
        "legal_address",
    ),
    "manager": (
        "management.name",
        "Руковод.0.ФИО",
        "manager.name",
        "ceo",
        "director",
        "manager",
    ),
    "okved": ("okved", "ОКВЭД.Код", "okved.code"),
}


def _extract(d: Any, path: str, default=None):
    """Extract nested value using dot notation; numeric parts index lists"""
    if not path:
        return d
    cur: Any = d
    for key in path.split("."):
        if cur is None:
            return default
        if isinstance(cur, dict):
            cur = cur.get(key)
        elif isinstance(cur, list) and key.isdigit():
            index = int(key)
            cur = cur[index] if index < len(cur) else None
        else:
            return default
    return default if cur is None else cur


def _scalar(value: Any) -> Optional[str]:
    """Only non-empty strings and numbers count as a value"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _first_match(node: Dict[str, Any], paths: Tuple[str, ...]) -> Optional[str]:
    for path in paths:
        value = _scalar(_extract(node, path))
        if value is not None:
            return value
    return None


def normalize(payload: Any) -> Optional[CompanyRecord]:
    """
    Map a raw provider payload to CompanyRecord.

    Partial records are valid; None means no recognizable structure at all.
    """
    if not isinstance(payload, dict):
        return None
    for root_path in ROOT_CANDIDATES:
        node = _extract(payload, root_path)
        if not isinstance(node, dict):
            continue
        fields = {field: _first_match(node, paths) for field, paths in FIELD_RULES.items()}
        if any(fields.values()):
            return CompanyRecord(**fields)
    return None
