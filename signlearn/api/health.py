"""Health and readiness endpoints.

  /health (liveness):  always 200 while the process can answer; ``status``
                       says "degraded" when the record store is unreachable.
  /ready  (readiness): 503 until the record store answers a ping, so a load
                       balancer stops routing here without restarting us.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from signlearn.api.dependencies import StoreDep
from signlearn.core.errors import StoreError
from signlearn.repos.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _store_ok(store: RecordStore) -> bool:
    try:
        await store.ping()
    except StoreError as e:
        logger.warning("Record store ping failed: %s", e.detail or e.message)
        return False
    return True


@router.get("/health")
async def health(store: StoreDep) -> dict:
    store_ok = await _store_ok(store)
    return {
        "status": "ok" if store_ok else "degraded",
        "checks": {"store": "ok" if store_ok else "degraded"},
    }


@router.get("/ready")
async def ready(store: StoreDep) -> Response:
    if not await _store_ok(store):
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)
