"""Entry point for the wallet-scorer Telegram bot."""

import asyncio
import signal

from loguru import logger

from config.settings import settings
from src.bot.bot import run_bot, stop_bot
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(level=settings.log_level)
    logger.info(f"Starting wallet-scorer bot ({settings.bot_mode} mode)...")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    if settings.bot_mode == "webhook":
        from src.api.server import run_webhook_server

        service_task = asyncio.create_task(run_webhook_server())
    else:
        service_task = asyncio.create_task(run_bot())

    done, pending = await asyncio.wait(
        [service_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )

    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    await stop_bot()
    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
