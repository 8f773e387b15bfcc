"""FastAPI application factory for the Telegram webhook deployment."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    from src.bot.bot import stop_bot

    await stop_bot()
    logger.info("[WEBHOOK] Bot session closed")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title="Wallet Scorer",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    from src.api.routers.health import router as health_router
    from src.api.routers.webhook import router as webhook_router

    app.include_router(health_router)
    app.include_router(webhook_router)
    return app
