"""FastAPI application factory for the leaderboard API."""

from __future__ import annotations

import os

from fastapi import FastAPI
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.cors import CORSMiddleware

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title="Coin Battle API",
        version="0.1.0",
        docs_url="/api/docs" if os.getenv("API_DEBUG") else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if os.getenv("API_DEBUG") else None,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Read-only API; the front end may live on another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from src.api.routers.battles import router as battles_router
    from src.api.routers.bracket import router as bracket_router
    from src.api.routers.health import router as health_router
    from src.api.routers.images import router as images_router
    from src.api.routers.leaderboard import router as leaderboard_router
    from src.api.routers.metrics import router as metrics_router

    app.include_router(health_router)
    app.include_router(leaderboard_router)
    app.include_router(battles_router)
    app.include_router(bracket_router)
    app.include_router(images_router)
    app.include_router(metrics_router)

    return app
