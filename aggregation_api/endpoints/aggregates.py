"""Read endpoints for aggregated buckets."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from common.errors import StoreError

from ..core.domain.bucket import BucketKind
from ..dependencies import get_store
from ..infrastructure.persistence.store import EnergyStore
from ..schemas import BucketOut

router = APIRouter(tags=["aggregates"])
logger = logging.getLogger(__name__)


def _list(store: EnergyStore, kind: BucketKind) -> List[BucketOut]:
    try:
        buckets = store.list_buckets(kind)
    except StoreError as e:
        logger.exception("Store error listing %s buckets err=%s", kind.value, type(e).__name__)
        raise HTTPException(status_code=503, detail="Store unavailable")
    return [BucketOut(bucket_start=b.bucket_start, kwh_value=b.value) for b in buckets]


@router.get("/aggregates/hourly", response_model=List[BucketOut])
def hourly_aggregates(store: EnergyStore = Depends(get_store)):
    return _list(store, BucketKind.HOURLY)


@router.get("/aggregates/daily", response_model=List[BucketOut])
def daily_aggregates(store: EnergyStore = Depends(get_store)):
    return _list(store, BucketKind.DAILY)
