# -*- coding: utf-8 -*-
"""
Проверка компании по ИНН: /check, ввод после кнопки меню и просто ИНН в чате
"""
from aiogram import Router, F
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile, Message, User

from bot.keyboards.main import main_menu_kb
from bot.states import SearchState
from core.logger import get_logger
from domain.models import OutcomeStatus, UserIdentity
from services.pipeline import CheckPipeline
from services.report.formatters import render_checking, render_usage_hint
from utils.validators import looks_like_tax_id, parse_tax_id

router = Router(name="check")
log = get_logger(__name__)


def identity_from_user(user: User) -> UserIdentity:
    return UserIdentity(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )


@router.message(Command("check"))
async def check_command(msg: Message, command: CommandObject, state: FSMContext, pipeline: CheckPipeline):
    """/check <ИНН>; без аргумента ждём ИНН следующим сообщением"""
    query = (command.args or "").strip()
    log.info("check_command", user_id=msg.from_user.id, has_query=bool(query))
    if not query:
        await state.set_state(SearchState.ASK_INN)
        await msg.answer(render_usage_hint())
        return
    await run_check(msg, state, pipeline, query)


@router.message(SearchState.ASK_INN, F.text)
async def on_inn_input(msg: Message, state: FSMContext, pipeline: CheckPipeline):
    await run_check(msg, state, pipeline, msg.text)


@router.message(F.text.func(looks_like_tax_id))
async def on_tax_id_text(msg: Message, state: FSMContext, pipeline: CheckPipeline):
    await run_check(msg, state, pipeline, msg.text)


@router.message()
async def on_other(msg: Message):
    await msg.answer(render_usage_hint(), reply_markup=main_menu_kb())


async def run_check(msg: Message, state: FSMContext, pipeline: CheckPipeline, text: str) -> None:
    inn = parse_tax_id(text)
    status_msg = await msg.answer(render_checking(inn)) if inn else None

    outcome = await pipeline.run(identity_from_user(msg.from_user), text)
    log.info("check outcome", user_id=msg.from_user.id, inn=outcome.inn, status=outcome.status.value,
             from_cache=outcome.from_cache)

    if status_msg is not None:
        try:
            await status_msg.delete()
        except TelegramAPIError as e:
            log.debug("status message not deleted", error=str(e))

    await msg.answer(outcome.text, reply_markup=main_menu_kb())
    if outcome.document:
        await msg.answer_document(BufferedInputFile(outcome.document, filename=outcome.document_name))

    # Некорректный ввод в режиме ASK_INN оставляет режим, чтобы можно было повторить
    if outcome.status != OutcomeStatus.INVALID:
        await state.clear()
