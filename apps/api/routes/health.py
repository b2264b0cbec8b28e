"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

import tubeloop
from tubeloop.config import Settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str  # "ok"
    version: str
    player_provider: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check endpoint."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    provider = str(settings.player.provider).strip().lower() if settings is not None else None
    return HealthResponse(status="ok", version=tubeloop.__version__, player_provider=provider)
