# -*- coding: utf-8 -*-
"""
FastAPI application: Telegram webhook + health check
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramAPIError
from fastapi import FastAPI

from api.webhook import router as webhook_router
from core.config import Settings
from core.logger import get_logger

log = get_logger(__name__)


def create_app(bot: Bot, dispatcher: Dispatcher, settings: Settings,
               resources: Sequence[Callable[[], Awaitable[None]]] = ()) -> FastAPI:
    """
    Args:
        resources: корутины закрытия (провайдеры, LLM, БД), вызываются при остановке
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        url = settings.webhook_url
        if url:
            try:
                await bot.set_webhook(
                    url,
                    secret_token=settings.WEBHOOK_SECRET or None,
                    allowed_updates=dispatcher.resolve_used_update_types(),
                )
                log.info("Webhook registered", url=url)
            except TelegramAPIError as e:
                log.error("Webhook registration failed", url=url, error=str(e))
        else:
            log.warning("PUBLIC_BASE_URL is not set, webhook is not registered")

        yield

        for close in resources:
            try:
                await close()
            except Exception as e:
                log.error("Resource close failed", error=str(e))
        await bot.session.close()
        log.info("Application stopped")

    app = FastAPI(title="ProverkaBiz Bot", version="1.0.0", lifespan=lifespan)
    app.state.bot = bot
    app.state.dispatcher = dispatcher
    app.state.settings = settings
    app.include_router(webhook_router)

    @app.get("/health")
    async def health():
        return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}

    return app
