"""FastAPI dependencies: bot/dispatcher singletons and webhook secret."""

from __future__ import annotations

from config.settings import settings


def get_telegram_bot():
    from src.bot.bot import get_bot

    return get_bot()


def get_telegram_dispatcher():
    from src.bot.bot import get_dispatcher

    return get_dispatcher()


def get_webhook_secret() -> str:
    return settings.telegram_webhook_secret
