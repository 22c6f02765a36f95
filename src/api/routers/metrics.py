"""Poller metrics."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from src.api.metrics_registry import registry

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("")
async def metrics_overview() -> dict[str, Any]:
    summary: dict[str, Any] = {}
    if registry.poller_metrics:
        summary = registry.poller_metrics.get_summary()
    summary["last_seq"] = registry.state.last_seq if registry.state else 0
    return summary
