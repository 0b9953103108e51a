# -*- coding: utf-8 -*-
from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from bot import texts
from bot.keyboards.main import ABOUT, CHECK_INN, PRICING, SUPPORT, main_menu_kb
from bot.states import SearchState
from core.config import Settings
from services.pipeline import CheckPipeline

router = Router(name="menu")


@router.callback_query(F.data == CHECK_INN)
async def menu_check_inn(cb: CallbackQuery, state: FSMContext):
    await state.set_state(SearchState.ASK_INN)
    await cb.message.answer(texts.ASK_INN)
    await cb.answer()


@router.callback_query(F.data == PRICING)
async def menu_pricing(cb: CallbackQuery, pipeline: CheckPipeline):
    await cb.message.answer(texts.pricing_text(pipeline.daily_limit), reply_markup=main_menu_kb())
    await cb.answer()


@router.callback_query(F.data == ABOUT)
async def menu_about(cb: CallbackQuery):
    await cb.message.answer(texts.ABOUT, reply_markup=main_menu_kb())
    await cb.answer()


@router.callback_query(F.data == SUPPORT)
async def menu_support(cb: CallbackQuery, settings: Settings):
    await cb.message.answer(texts.support_text(settings.SUPPORT_CONTACT), reply_markup=main_menu_kb())
    await cb.answer()


@router.callback_query()
async def menu_unknown(cb: CallbackQuery):
    """Устаревшие кнопки: просто снимаем "часики" """
    await cb.answer()
