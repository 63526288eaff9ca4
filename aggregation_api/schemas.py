from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field


class RejectedReadingOut(BaseModel):
    index: int
    record: Any = None
    reason: str


class IngestResult(BaseModel):
    inserted: int
    rejected: List[RejectedReadingOut] = Field(default_factory=list)


class BucketOut(BaseModel):
    bucket_start: datetime
    kwh_value: float
