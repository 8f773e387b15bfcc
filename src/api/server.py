"""Webhook server: runs uvicorn inside the existing asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


async def run_webhook_server() -> None:
    """Serve the FastAPI webhook app until cancelled."""
    from src.api.app import create_app

    app = create_app()
    config = uvicorn.Config(
        app=app,
        host=settings.webhook_host,
        port=settings.webhook_port,
        log_level="warning",
        loop="none",  # use the existing event loop
    )
    server = uvicorn.Server(config)
    logger.info(f"Webhook server starting on http://{settings.webhook_host}:{settings.webhook_port}")
    await server.serve()
