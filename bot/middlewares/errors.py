# -*- coding: utf-8 -*-
from typing import Any, Awaitable, Callable, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramAPIError
from aiogram.types import TelegramObject, Update

from core.logger import get_logger
from services.report.formatters import render_internal_error

log = get_logger(__name__)


def _chat_id(event: TelegramObject) -> Optional[int]:
    if isinstance(event, Update):
        message = event.message or event.edited_message
        if message is None and event.callback_query is not None:
            message = event.callback_query.message
    else:
        message = getattr(event, "message", event)
    chat = getattr(message, "chat", None)
    return chat.id if chat is not None else None


class ErrorsMiddleware(BaseMiddleware):
    """Любая ошибка обработчика логируется, пользователь получает ответ, апдейт считается обработанным"""

    async def __call__(self,
                       handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
                       event: TelegramObject,
                       data: Dict[str, Any]) -> Any:
        try:
            return await handler(event, data)
        except Exception as e:
            log.exception("Unhandled bot error", update_id=getattr(event, "update_id", None), error=str(e))
            await self._notify(event, data)
            return None

    @staticmethod
    async def _notify(event: TelegramObject, data: Dict[str, Any]) -> None:
        bot = data.get("bot")
        chat_id = _chat_id(event)
        if bot is None or chat_id is None:
            return
        try:
            await bot.send_message(chat_id, render_internal_error())
        except TelegramAPIError as e:
            log.error("Failed to notify user about error", chat_id=chat_id, error=str(e))
