"""Prometheus scrape endpoint.

Serves every metric in signlearn/core/metrics.py in text exposition
format.  The enrollment/completion counters here are process-local; the
durable counts live on the course and package records.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
