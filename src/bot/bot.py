"""Telegram bot lifecycle: aiogram 3.x, polling or webhook.

The Dispatcher carries one WalletScorer in its workflow data, so handlers
receive it as the ``scorer`` argument.
"""

from loguru import logger

from src.scoring.wallet_scorer import WalletScorer, create_wallet_scorer

_bot_instance = None
_dp_instance = None


def get_bot():
    """Get or create the aiogram Bot singleton."""
    global _bot_instance
    if _bot_instance is None:
        from aiogram import Bot

        from config.settings import settings

        if not settings.telegram_bot_token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN not configured")
        _bot_instance = Bot(token=settings.telegram_bot_token)
    return _bot_instance


def get_dispatcher(scorer: WalletScorer | None = None):
    """Get or create the Dispatcher singleton with handlers registered."""
    global _dp_instance
    if _dp_instance is None:
        from aiogram import Dispatcher

        from src.bot.handlers import router

        _dp_instance = Dispatcher()
        _dp_instance["scorer"] = scorer or create_wallet_scorer()
        _dp_instance.include_router(router)
    return _dp_instance


async def run_bot() -> None:
    """Start the Telegram bot in polling mode. Runs until cancelled."""
    try:
        bot = get_bot()
        dp = get_dispatcher()
        logger.info("[BOT] Starting Telegram bot (polling mode)")
        await dp.start_polling(bot, close_bot_session=False)
    except RuntimeError as e:
        logger.warning(f"[BOT] Cannot start: {e}")


async def stop_bot() -> None:
    """Close the bot session and the scorer's HTTP client."""
    global _bot_instance, _dp_instance
    if _dp_instance is not None:
        scorer = _dp_instance.get("scorer")
        if scorer is not None:
            await scorer.close()
        _dp_instance = None
    if _bot_instance:
        await _bot_instance.session.close()
        _bot_instance = None
