"""FastAPI application factory."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI

from .metrics import instrument_app, router as metrics_router
from .routers import podcasts
from .schemas import HealthResponse
from .settings import get_settings


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = FastAPI(title=settings.app_name, version=settings.version)

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(ok=True, timestamp=datetime.now(timezone.utc))

    app.include_router(podcasts.router)
    app.include_router(metrics_router)
    return instrument_app(app)


app = create_app()
