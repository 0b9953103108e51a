# -*- coding: utf-8 -*-
"""
Тесты обработчиков бота и middleware ошибок
"""
from types import SimpleNamespace
from unittest.mock import ANY, AsyncMock, MagicMock

import pytest
from aiogram.filters import CommandObject
from aiogram.types import BufferedInputFile, Update

from bot.dispatcher import build_dispatcher
from bot.handlers.check import check_command, on_inn_input, on_other, on_tax_id_text
from bot.handlers.menu import menu_check_inn, menu_support
from bot.handlers.start import on_start
from bot.keyboards.main import CHECK_INN, main_menu_kb
from bot.middlewares.errors import ErrorsMiddleware
from bot.states import SearchState
from core.config import Settings
from domain.models import CheckOutcome, OutcomeStatus, QuotaDecision

INN = "7707083893"


@pytest.fixture
def msg():
    message = AsyncMock()
    message.from_user = SimpleNamespace(id=1001, username="buh", first_name="Анна", last_name=None)
    message.text = INN
    return message


@pytest.fixture
def state():
    return AsyncMock()


@pytest.fixture
def pipeline():
    pipeline = AsyncMock()
    pipeline.daily_limit = 3
    pipeline.run.return_value = CheckOutcome(status=OutcomeStatus.OK, text="карточка", inn=INN)
    return pipeline


class TestCheckHandlers:

    async def test_tax_id_text_runs_pipeline(self, msg, state, pipeline):
        await on_tax_id_text(msg, state, pipeline)

        identity, text = pipeline.run.await_args.args
        assert identity.id == 1001
        assert text == INN
        msg.answer.assert_any_await("карточка", reply_markup=ANY)
        state.clear.assert_awaited_once()

    async def test_document_is_sent(self, msg, state, pipeline):
        pipeline.run.return_value = CheckOutcome(status=OutcomeStatus.OK, text="карточка", inn=INN,
                                                 document=b"%PDF-1.4", document_name="r.pdf")
        await on_tax_id_text(msg, state, pipeline)

        document = msg.answer_document.await_args.args[0]
        assert isinstance(document, BufferedInputFile)
        assert document.filename == "r.pdf"

    async def test_invalid_input_keeps_state(self, msg, state, pipeline):
        msg.text = "12345"
        pipeline.run.return_value = CheckOutcome(status=OutcomeStatus.INVALID, text="Некорректный ИНН")
        await on_inn_input(msg, state, pipeline)

        msg.answer.assert_awaited_once_with("Некорректный ИНН", reply_markup=ANY)
        state.clear.assert_not_awaited()

    async def test_check_command_with_argument(self, msg, state, pipeline):
        msg.text = f"/check {INN}"
        await check_command(msg, CommandObject(prefix="/", command="check", args=INN), state, pipeline)
        assert pipeline.run.await_args.args[1] == INN

    async def test_check_command_without_argument_asks_inn(self, msg, state, pipeline):
        await check_command(msg, CommandObject(prefix="/", command="check"), state, pipeline)
        state.set_state.assert_awaited_once_with(SearchState.ASK_INN)
        pipeline.run.assert_not_awaited()

    async def test_other_text_gets_hint(self, msg):
        msg.text = "привет"
        await on_other(msg)
        assert "10 или 12 цифр" in msg.answer.await_args.args[0]


class TestStartAndMenu:

    async def test_start_shows_limit(self, msg, state, pipeline):
        pipeline.quota_state.return_value = QuotaDecision(allowed=True, remaining=2, limit=3)
        await on_start(msg, state, pipeline)

        text = msg.answer.await_args.args[0]
        assert "Анна" in text
        assert "3 проверки в день" in text
        assert "<b>2</b> из 3" in text
        state.clear.assert_awaited_once()

    async def test_check_inn_button(self, state):
        cb = AsyncMock()
        await menu_check_inn(cb, state)
        state.set_state.assert_awaited_once_with(SearchState.ASK_INN)
        cb.answer.assert_awaited_once()

    async def test_support_button(self):
        cb = AsyncMock()
        await menu_support(cb, Settings(SUPPORT_CONTACT="@support<bot>"))
        assert "@support&lt;bot&gt;" in cb.message.answer.await_args.args[0]
        cb.answer.assert_awaited_once()

    def test_menu_has_check_button(self):
        buttons = [b.callback_data for row in main_menu_kb().inline_keyboard for b in row]
        assert CHECK_INN in buttons


class TestErrorsMiddleware:

    async def test_error_is_reported_to_chat(self):
        update = Update.model_validate({
            "update_id": 1,
            "message": {"message_id": 5, "date": 0, "chat": {"id": 42, "type": "private"}, "text": INN},
        })
        bot = AsyncMock()
        handler = AsyncMock(side_effect=RuntimeError("boom"))

        result = await ErrorsMiddleware()(handler, update, {"bot": bot})

        assert result is None
        bot.send_message.assert_awaited_once()
        assert bot.send_message.await_args.args[0] == 42

    async def test_passes_result_through(self):
        handler = AsyncMock(return_value="done")
        assert await ErrorsMiddleware()(handler, MagicMock(), {}) == "done"


class TestDispatcher:

    def test_dependencies_in_workflow_data(self):
        pipeline = MagicMock()
        settings = Settings()
        dp = build_dispatcher(pipeline, settings)
        assert dp["pipeline"] is pipeline
        assert dp["settings"] is settings
        assert [r.name for r in dp.sub_routers] == ["start", "menu", "check"]
