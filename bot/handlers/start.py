# -*- coding: utf-8 -*-
from aiogram import Router
from aiogram.filters import CommandStart, Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from bot import texts
from bot.handlers.check import identity_from_user
from bot.keyboards.main import main_menu_kb
from services.pipeline import CheckPipeline
from services.report.formatters import render_quota_line

router = Router(name="start")


@router.message(CommandStart())
async def on_start(message: Message, state: FSMContext, pipeline: CheckPipeline):
    await state.clear()
    quota = await pipeline.quota_state(identity_from_user(message.from_user))
    await message.answer(
        texts.start_text(message.from_user.first_name, pipeline.daily_limit, render_quota_line(quota)),
        reply_markup=main_menu_kb(),
        disable_web_page_preview=True,
    )


@router.message(Command("help"))
async def on_help(message: Message, pipeline: CheckPipeline):
    await message.answer(texts.help_text(pipeline.daily_limit), reply_markup=main_menu_kb())
