"""API server: uvicorn inside the worker's asyncio event loop."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from loguru import logger

from config.settings import settings


def build_server_config(app: FastAPI) -> uvicorn.Config:
    # loop="none": share the poller's loop; access logs would drown the poller lines
    return uvicorn.Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="warning",
        access_log=settings.api_access_log,
        loop="none",
    )


async def run_dashboard_server() -> None:
    """Serve the leaderboard API until cancelled."""
    from src.api.app import create_app

    config = build_server_config(create_app())
    logger.info(f"[API] Serving leaderboard on http://{config.host}:{config.port}/api/v1")
    await uvicorn.Server(config).serve()
