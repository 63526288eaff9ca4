"""Reading ingest endpoints (single and bulk)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from common.errors import StoreError

from ..auth import require_api_key
from ..core.validation.record_parser import ParseOutcome, parse_records
from ..dependencies import get_scheduler, get_store
from ..infrastructure.persistence.store import EnergyStore
from ..scheduler.periodic import AggregationScheduler
from ..schemas import IngestResult, RejectedReadingOut

router = APIRouter(tags=["ingest"])
logger = logging.getLogger(__name__)


def _ingest(
    payload: List[Dict[str, Any]],
    store: EnergyStore,
    scheduler: AggregationScheduler,
) -> IngestResult:
    outcome: ParseOutcome = parse_records(payload)

    try:
        # Raw readings are written under the same lock as the aggregation cycles.
        with scheduler.lock:
            inserted = store.upsert_raw_readings(outcome.readings)
    except StoreError as e:
        logger.exception("Store error while ingesting readings err=%s", type(e).__name__)
        raise HTTPException(status_code=503, detail="Store unavailable")

    return IngestResult(
        inserted=inserted,
        rejected=[
            RejectedReadingOut(index=r.index, record=r.record, reason=r.reason)
            for r in outcome.rejected
        ],
    )


@router.post("/readings", response_model=IngestResult, dependencies=[Depends(require_api_key)])
def ingest_reading(
    payload: Dict[str, Any],
    store: EnergyStore = Depends(get_store),
    scheduler: AggregationScheduler = Depends(get_scheduler),
):
    """Insert or overwrite one reading.

    The body is validated record by record, the same way as a bulk document,
    so a bad timestamp or value comes back in `rejected` with `inserted == 0`.
    """
    return _ingest([payload], store, scheduler)


@router.post("/readings/bulk", response_model=IngestResult, dependencies=[Depends(require_api_key)])
def ingest_readings_bulk(
    payload: List[Dict[str, Any]],
    store: EnergyStore = Depends(get_store),
    scheduler: AggregationScheduler = Depends(get_scheduler),
):
    """Insert or overwrite a document of readings.

    Only the document shape (an array of objects) is checked by FastAPI.
    Records with an unparseable timestamp or a value that is not a real
    number are skipped and listed in `rejected`; the rest are stored.
    """
    if not payload:
        return IngestResult(inserted=0)
    return _ingest(payload, store, scheduler)
