"""Request-scoped access to the handles created at startup."""

from __future__ import annotations

from fastapi import Request

from .infrastructure.persistence.store import EnergyStore
from .scheduler.periodic import AggregationScheduler


def get_store(request: Request) -> EnergyStore:
    return request.app.state.store


def get_scheduler(request: Request) -> AggregationScheduler:
    return request.app.state.scheduler
