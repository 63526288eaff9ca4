"""Health, readiness and metrics endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text

from common.errors import StoreError

from ..dependencies import get_scheduler, get_store

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(store=Depends(get_store)):
    """Readiness probe: checks store connectivity."""
    try:
        with store.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logging.getLogger(__name__).exception("Readiness check failed")
        raise HTTPException(status_code=503, detail="not ready")


@router.get("/metrics")
def metrics(store=Depends(get_store), scheduler=Depends(get_scheduler)):
    """Scheduler cycle stats plus the raw reading count."""
    result: dict = {"scheduler": scheduler.stats()}
    try:
        result["readings"] = store.count_readings()
    except StoreError as e:
        logging.getLogger(__name__).warning("Reading count unavailable: %s", e)
        result["readings"] = None
    return result
