"""FastAPI dependency injection: registry and the published batch."""

from __future__ import annotations

from fastapi import HTTPException, status

from src.api.metrics_registry import MetricsRegistry, registry
from src.parsers.ipfs.client import ImageResolver
from src.parsers.worker import PublishedBatch


def get_registry() -> MetricsRegistry:
    """Return the global metrics registry."""
    return registry


def get_batch() -> PublishedBatch:
    """Latest ranked batch, or 503 until the poller has published one."""
    batch = registry.state.latest if registry.state else None
    if batch is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Leaderboard not loaded yet",
        )
    return batch


def get_image_resolver() -> ImageResolver:
    if registry.image_resolver is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image resolver not running",
        )
    return registry.image_resolver
