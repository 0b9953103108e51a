# -*- coding: utf-8 -*-
"""
Валидация пользовательского ввода
"""
import re
from typing import Optional

_TAX_ID_RE = re.compile(r"[0-9]{10}|[0-9]{12}")
# Цифры с пробелами/дефисами: похоже на ИНН, но длина не та
_DIGITISH_RE = re.compile(r"[0-9][0-9\s-]*")


def parse_tax_id(text: Optional[str]) -> Optional[str]:
    """
    Возвращает ИНН (10 или 12 цифр ASCII) либо None.

    Пробелы по краям допускаются, внутри - нет.
    """
    if not text:
        return None
    candidate = text.strip()
    if _TAX_ID_RE.fullmatch(candidate):
        return candidate
    return None


def looks_like_tax_id(text: Optional[str]) -> bool:
    """Текст из цифр (можно с пробелами и дефисами): пользователь явно пытался ввести ИНН"""
    if not text:
        return False
    return bool(_DIGITISH_RE.fullmatch(text.strip()))
