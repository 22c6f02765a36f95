"""Singleton registry for runtime objects shared between worker and API.

Populated once during ``run_worker()`` initialization. FastAPI endpoints
read these references directly; everything runs in one asyncio event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.parsers.ipfs.client import ImageResolver
    from src.parsers.metrics import PollerMetrics
    from src.parsers.worker import LeaderboardState


class MetricsRegistry:
    """Holds references to runtime objects for API access."""

    state: LeaderboardState | None = None
    poller_metrics: PollerMetrics | None = None
    image_resolver: ImageResolver | None = None


registry = MetricsRegistry()
