"""Energy aggregation service.

Startup creates the store tables (fatal if that fails), builds the store and
the scheduler, and starts the hourly and daily cycles. The handles live on
`app.state` and are handed to the endpoints through dependencies.

Run:
    uvicorn aggregation_api.main:app --port 8001
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from common.config import Settings, get_settings
from common.db import build_engine

from .endpoints import aggregates_router, health_router, readings_router
from .infrastructure.persistence import EnergyStore, ensure_schema
from .scheduler.periodic import AggregationScheduler

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_engine = engine if engine is not None else build_engine(settings)
        # SchemaError propagates and aborts startup.
        ensure_schema(app_engine)

        store = EnergyStore(app_engine)
        app_scheduler = AggregationScheduler(
            store,
            hourly_interval=settings.hourly_interval_seconds,
            daily_interval=settings.daily_interval_seconds,
            align_to_boundaries=settings.align_to_boundaries,
        )

        app.state.settings = settings
        app.state.store = store
        app.state.scheduler = app_scheduler

        if settings.scheduler_enabled:
            app_scheduler.start()
        else:
            logger.info("[App] Scheduler disabled (AGG_SCHEDULER_ENABLED=false)")

        try:
            yield
        finally:
            app_scheduler.stop()
            if engine is None:
                app_engine.dispose()

    app = FastAPI(title="Energy Aggregation Service", version="0.1.0", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(readings_router)
    app.include_router(aggregates_router)
    return app


app = create_app()
