"""Telegram webhook endpoint: feeds updates into the aiogram dispatcher."""

from __future__ import annotations

from typing import Any

from aiogram.types import Update
from fastapi import APIRouter, Depends, Header, HTTPException
from loguru import logger

from src.api.dependencies import get_telegram_bot, get_telegram_dispatcher, get_webhook_secret

router = APIRouter(prefix="/telegram", tags=["telegram"])


@router.post("/webhook")
async def telegram_webhook(
    payload: dict[str, Any],
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
    expected_secret: str = Depends(get_webhook_secret),
    bot=Depends(get_telegram_bot),
    dp=Depends(get_telegram_dispatcher),
) -> dict[str, Any]:
    """Process one update. Answers 200 even on handler errors so Telegram
    does not redeliver the same update."""
    if expected_secret and secret_token != expected_secret:
        raise HTTPException(status_code=401, detail="Invalid secret token")

    try:
        update = Update.model_validate(payload, context={"bot": bot})
        await dp.feed_update(bot, update)
    except Exception as e:
        logger.error(f"[WEBHOOK] Update {payload.get('update_id')} failed: {e}")
        return {"ok": True, "error": str(e)}
    return {"ok": True}
