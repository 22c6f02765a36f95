"""Health check."""

from __future__ import annotations

import time

from fastapi import APIRouter
from pydantic import BaseModel

from config.settings import settings
from src.api.metrics_registry import registry

router = APIRouter(prefix="/api/v1", tags=["health"])

# A batch older than this many poll intervals counts as stale
STALE_AFTER_INTERVALS = 3


class HealthResponse(BaseModel):
    status: str
    version: str
    last_seq: int
    batch_size: int
    batch_age_sec: float | None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report whether the poller has published a recent batch."""
    batch = registry.state.latest if registry.state else None
    if batch is None:
        return HealthResponse(
            status="loading", version="0.1.0", last_seq=0, batch_size=0, batch_age_sec=None
        )

    age = max(time.time() - batch.scored_at, 0.0)
    stale = age > settings.poll_interval_sec * STALE_AFTER_INTERVALS
    return HealthResponse(
        status="stale" if stale else "ok",
        version="0.1.0",
        last_seq=batch.seq,
        batch_size=len(batch.curves),
        batch_age_sec=round(age, 1),
    )
