# -*- coding: utf-8 -*-
"""Настройки проекта ProverkaBiz - проверка контрагентов по ИНН"""

import os
from pathlib import Path

from dotenv import load_dotenv


# Загрузка переменных окружения
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# === Telegram ===
BOT_TOKEN = os.getenv("BOT_TOKEN", "")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")  # e.g. https://inn-telegram-bot.onrender.com
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _get_int("PORT", 10000)
SUPPORT_CONTACT = os.getenv("SUPPORT_CONTACT", "")

# === Провайдеры данных ===
# Порядок важен: в режиме fallback опрашиваются по очереди,
# в режиме parallel порядок разрешает ничьи при слиянии.
PROVIDERS = os.getenv("PROVIDERS", "dadata,checko")
PROVIDER_MODE = os.getenv("PROVIDER_MODE", "fallback")  # fallback | race | parallel

CHECKO_API = os.getenv("CHECKO_API", "https://api.checko.ru/v2")
CHECKO_API_KEY = os.getenv("CHECKO_API_KEY", "")

DADATA_API = os.getenv("DADATA_API", "https://suggestions.dadata.ru/suggestions/api/4_1/rs")
DADATA_API_KEY = os.getenv("DADATA_API_KEY", "")

# === Общие настройки ===
REQUEST_TIMEOUT = _get_float("REQUEST_TIMEOUT", 10)
MAX_RETRIES = _get_int("MAX_RETRIES", 2)
RETRY_BACKOFF = _get_float("RETRY_BACKOFF", 0.5)

# === Database Configuration ===
# Database type: sqlite or postgresql
DATABASE_TYPE = os.getenv("DATABASE_TYPE", "sqlite")

SQLITE_PATH = os.getenv("SQLITE_PATH", "data/bot.db")

POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = _get_int("POSTGRES_PORT", 5432)
POSTGRES_DB = os.getenv("POSTGRES_DB", "proverkabiz")
POSTGRES_USER = os.getenv("POSTGRES_USER", "proverkabiz")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")

# Database URL for SQLAlchemy
if DATABASE_TYPE == "postgresql":
    DATABASE_URL = f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}"
else:
    DATABASE_URL = f"sqlite+aiosqlite:///{SQLITE_PATH}"

# === Кэширование ===
CACHE_TTL_HOURS = _get_int("CACHE_TTL_HOURS", 24)

# === Лимиты ===
FREE_DAILY_LIMIT = _get_int("FREE_DAILY_LIMIT", 3)
# Если хранилище квот недоступно: True - пропускаем пользователя, False - отказываем
QUOTA_FAIL_OPEN = _get_bool("QUOTA_FAIL_OPEN", True)

# === OpenAI (опционально) ===
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TIMEOUT = _get_float("LLM_TIMEOUT", 20)

# === PDF и брендирование ===
ENABLE_PDF = _get_bool("ENABLE_PDF", True)
REPORT_BRAND = os.getenv("REPORT_BRAND", "ProverkaBiz")
REPORT_WATERMARK = os.getenv("REPORT_WATERMARK", "ПРОВЕРЕНО")

# === Логирование ===
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_FILE = os.getenv("LOG_FILE", "")
