"""Health check: no auth required."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from src.scoring.config import CHAINS

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    chains: list[str]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        chains=[info.name for info in CHAINS.values()],
    )
