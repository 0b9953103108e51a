# -*- coding: utf-8 -*-
"""
Конфигурация приложения
"""
from dataclasses import dataclass
from typing import List
import importlib


@dataclass
class Settings:
    """Настройки приложения"""
    # Telegram
    BOT_TOKEN: str = ""
    PUBLIC_BASE_URL: str = ""
    WEBHOOK_SECRET: str = ""
    HOST: str = "0.0.0.0"
    PORT: int = 10000
    SUPPORT_CONTACT: str = ""
    # Провайдеры
    PROVIDERS: str = "dadata,checko"
    PROVIDER_MODE: str = "fallback"
    CHECKO_API: str = "https://api.checko.ru/v2"
    CHECKO_API_KEY: str = ""
    DADATA_API: str = "https://suggestions.dadata.ru/suggestions/api/4_1/rs"
    DADATA_API_KEY: str = ""
    # Общие настройки
    REQUEST_TIMEOUT: float = 10
    MAX_RETRIES: int = 2
    RETRY_BACKOFF: float = 0.5
    # Database
    DATABASE_TYPE: str = "sqlite"
    DATABASE_URL: str = "sqlite+aiosqlite:///data/bot.db"
    # Кэш и лимиты
    CACHE_TTL_HOURS: int = 24
    FREE_DAILY_LIMIT: int = 3
    QUOTA_FAIL_OPEN: bool = True
    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT: float = 20
    # PDF и брендирование
    ENABLE_PDF: bool = True
    REPORT_BRAND: str = "ProverkaBiz"
    REPORT_WATERMARK: str = "ПРОВЕРЕНО"
    # Логирование
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    LOG_FILE: str = ""

    @property
    def provider_names(self) -> List[str]:
        return [p.strip().lower() for p in self.PROVIDERS.split(",") if p.strip()]

    @property
    def webhook_url(self) -> str:
        if not self.PUBLIC_BASE_URL:
            return ""
        return f"{self.PUBLIC_BASE_URL.rstrip('/')}/webhook"


def load_settings() -> Settings:
    """Загружает настройки из settings.py"""
    cfg = importlib.import_module("settings")
    defaults = Settings()
    return Settings(
        # Telegram
        BOT_TOKEN=getattr(cfg, "BOT_TOKEN", defaults.BOT_TOKEN),
        PUBLIC_BASE_URL=getattr(cfg, "PUBLIC_BASE_URL", defaults.PUBLIC_BASE_URL),
        WEBHOOK_SECRET=getattr(cfg, "WEBHOOK_SECRET", defaults.WEBHOOK_SECRET),
        HOST=getattr(cfg, "HOST", defaults.HOST),
        PORT=getattr(cfg, "PORT", defaults.PORT),
        SUPPORT_CONTACT=getattr(cfg, "SUPPORT_CONTACT", defaults.SUPPORT_CONTACT),
        # Провайдеры
        PROVIDERS=getattr(cfg, "PROVIDERS", defaults.PROVIDERS),
        PROVIDER_MODE=getattr(cfg, "PROVIDER_MODE", defaults.PROVIDER_MODE),
        CHECKO_API=getattr(cfg, "CHECKO_API", defaults.CHECKO_API),
        CHECKO_API_KEY=getattr(cfg, "CHECKO_API_KEY", defaults.CHECKO_API_KEY),
        DADATA_API=getattr(cfg, "DADATA_API", defaults.DADATA_API),
        DADATA_API_KEY=getattr(cfg, "DADATA_API_KEY", defaults.DADATA_API_KEY),
        # Общие настройки
        REQUEST_TIMEOUT=getattr(cfg, "REQUEST_TIMEOUT", defaults.REQUEST_TIMEOUT),
        MAX_RETRIES=getattr(cfg, "MAX_RETRIES", defaults.MAX_RETRIES),
        RETRY_BACKOFF=getattr(cfg, "RETRY_BACKOFF", defaults.RETRY_BACKOFF),
        # Database
        DATABASE_TYPE=getattr(cfg, "DATABASE_TYPE", defaults.DATABASE_TYPE),
        DATABASE_URL=getattr(cfg, "DATABASE_URL", defaults.DATABASE_URL),
        # Кэш и лимиты
        CACHE_TTL_HOURS=getattr(cfg, "CACHE_TTL_HOURS", defaults.CACHE_TTL_HOURS),
        FREE_DAILY_LIMIT=getattr(cfg, "FREE_DAILY_LIMIT", defaults.FREE_DAILY_LIMIT),
        QUOTA_FAIL_OPEN=bool(getattr(cfg, "QUOTA_FAIL_OPEN", defaults.QUOTA_FAIL_OPEN)),
        # OpenAI
        OPENAI_API_KEY=getattr(cfg, "OPENAI_API_KEY", defaults.OPENAI_API_KEY),
        OPENAI_MODEL=getattr(cfg, "OPENAI_MODEL", defaults.OPENAI_MODEL),
        LLM_TIMEOUT=getattr(cfg, "LLM_TIMEOUT", defaults.LLM_TIMEOUT),
        # PDF и брендирование
        ENABLE_PDF=bool(getattr(cfg, "ENABLE_PDF", defaults.ENABLE_PDF)),
        REPORT_BRAND=getattr(cfg, "REPORT_BRAND", defaults.REPORT_BRAND),
        REPORT_WATERMARK=getattr(cfg, "REPORT_WATERMARK", defaults.REPORT_WATERMARK),
        # Логирование
        LOG_LEVEL=getattr(cfg, "LOG_LEVEL", defaults.LOG_LEVEL),
        LOG_FORMAT=getattr(cfg, "LOG_FORMAT", defaults.LOG_FORMAT),
        LOG_FILE=getattr(cfg, "LOG_FILE", defaults.LOG_FILE),
    )
