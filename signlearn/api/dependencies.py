"""FastAPI dependencies that hand out the request's store and services.

The store is created by the application lifespan and kept on
``app.state.store``; nothing here is a module-level singleton.  Tests swap
the store by assigning ``app.state.store`` directly.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from signlearn.core.errors import NotFoundError
from signlearn.repos.record_store import RecordStore
from signlearn.services.catalog_service import CatalogService
from signlearn.services.progress_engine import ProgressEngine


def get_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("record store is not initialized (lifespan not run?)")
    return store


StoreDep = Annotated[RecordStore, Depends(get_store)]


def get_engine(store: StoreDep) -> ProgressEngine:
    return ProgressEngine(store)


EngineDep = Annotated[ProgressEngine, Depends(get_engine)]


def get_catalog(engine: EngineDep) -> CatalogService:
    return CatalogService(engine)


CatalogDep = Annotated[CatalogService, Depends(get_catalog)]


def parse_user_id(user_id: str) -> UUID:
    """Path ``user_id`` as a UUID; an id no user can have is a 404."""
    try:
        return UUID(user_id)
    except ValueError:
        raise NotFoundError("User not found") from None


UserIdDep = Annotated[UUID, Depends(parse_user_id)]
