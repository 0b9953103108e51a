# -*- coding: utf-8 -*-
"""
Сборка aiogram Dispatcher: роутеры, middleware и зависимости в workflow data
"""
from aiogram import Dispatcher

from bot.handlers.check import router as check_router
from bot.handlers.menu import router as menu_router
from bot.handlers.start import router as start_router
from bot.middlewares.errors import ErrorsMiddleware
from core.config import Settings
from services.pipeline import CheckPipeline


def build_dispatcher(pipeline: CheckPipeline, settings: Settings) -> Dispatcher:
    dp = Dispatcher(pipeline=pipeline, settings=settings)
    dp.update.middleware(ErrorsMiddleware())
    # check последним: в нём обработчик "любого другого текста"
    dp.include_routers(start_router, menu_router, check_router)
    return dp
