# -*- coding: utf-8 -*-
"""
Главный файл приложения ProverkaBiz Bot (webhook + FastAPI)
"""
import asyncio
import sys

import uvicorn
from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.types import BotCommand
from aiogram.exceptions import TelegramAPIError

from api.app import create_app
from bot.dispatcher import build_dispatcher
from core.config import load_settings
from core.logger import setup_logging
from services.database import DatabaseService
from services.enrichment import build_summarizer
from services.pipeline import build_pipeline
from services.providers.chain import build_provider_chain

# Set Windows event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def main():
    """Основная функция запуска бота"""
    settings = load_settings()
    log = setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)
    log.info(
        "Settings loaded",
        bot_token_present=bool(settings.BOT_TOKEN),
        providers=settings.provider_names,
        provider_mode=settings.PROVIDER_MODE,
        database_type=settings.DATABASE_TYPE,
        openai_enabled=bool(settings.OPENAI_API_KEY),
    )
    if not settings.BOT_TOKEN:
        log.error("BOT_TOKEN is not configured")
        raise RuntimeError("BOT_TOKEN is empty. Set it in .env or environment.")

    db = DatabaseService(settings.DATABASE_URL)
    await db.initialize()
    log.info("Database initialized", dialect=db.dialect)

    chain = build_provider_chain(settings)
    summarizer = build_summarizer(settings)
    pipeline = build_pipeline(settings, db, chain, summarizer)

    bot = Bot(token=settings.BOT_TOKEN, default=DefaultBotProperties(parse_mode="HTML"))
    dp = build_dispatcher(pipeline, settings)

    try:
        await bot.set_my_commands(
            [
                BotCommand(command="start", description="Запустить бота"),
                BotCommand(command="check", description="Проверить компанию: /check <ИНН>"),
                BotCommand(command="help", description="Помощь и лимиты"),
            ]
        )
    except TelegramAPIError as e:
        log.warning("Failed to set bot commands", error=str(e))

    app = create_app(bot, dp, settings, resources=(chain.aclose, summarizer.aclose, db.close))
    server = uvicorn.Server(uvicorn.Config(app, host=settings.HOST, port=settings.PORT, log_config=None))
    log.info("Starting webhook server", host=settings.HOST, port=settings.PORT)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)
