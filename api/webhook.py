# -*- coding: utf-8 -*-
"""
Telegram webhook: апдейт валидируется и отдаётся диспетчеру в фоне, ответ - сразу
"""
import hmac
from typing import Optional

from aiogram.types import Update
from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Request

from core.logger import get_logger

router = APIRouter(tags=["telegram"])
log = get_logger(__name__)


@router.post("/webhook")
async def telegram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_telegram_bot_api_secret_token: Optional[str] = Header(None),
):
    """
    Telegram повторяет доставку, пока не получит 200, поэтому мусор
    в теле тоже подтверждаем. 403 - только при неверном секрете.
    """
    state = request.app.state
    secret = state.settings.WEBHOOK_SECRET
    if secret and not hmac.compare_digest(x_telegram_bot_api_secret_token or "", secret):
        log.warning("Webhook secret mismatch", client=request.client.host if request.client else None)
        raise HTTPException(status_code=403, detail="Forbidden")

    try:
        payload = await request.json()
        update = Update.model_validate(payload, context={"bot": state.bot})
    except ValueError as e:
        log.warning("Malformed update ignored", error=str(e)[:300])
        return {"ok": True}

    log.debug("Update received", update_id=update.update_id)
    background_tasks.add_task(state.dispatcher.feed_update, state.bot, update)
    return {"ok": True}
