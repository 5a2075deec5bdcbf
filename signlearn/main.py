from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signlearn.api.analytics import router as analytics_router
from signlearn.api.auth import router as auth_router
from signlearn.api.courses import router as courses_router
from signlearn.api.errors import install_error_handlers
from signlearn.api.health import router as health_router
from signlearn.api.metrics_endpoint import router as metrics_router
from signlearn.api.packages import router as packages_router
from signlearn.api.progress import router as progress_router
from signlearn.api.users import router as users_router
from signlearn.core.config import SETTINGS
from signlearn.core.logging import setup_logging
from signlearn.db.engine import create_engine, create_session_factory
from signlearn.db.seed import seed_catalog
from signlearn.middleware.metrics import MetricsMiddleware
from signlearn.middleware.request_context import (
    RequestContextMiddleware,
    install_request_id_factory,
)
from signlearn.repos.pg_record_store import PgRecordStore
from signlearn.repos.record_store import InMemoryRecordStore

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_request_id_factory()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if not SETTINGS.database_url:
        logger.info("No DATABASE_URL configured, using in-memory record store")
        app.state.store = InMemoryRecordStore()
        if SETTINGS.seed_catalog:
            await seed_catalog(app.state.store)
        yield
        return

    engine = create_engine(SETTINGS.database_url, echo=SETTINGS.is_dev)
    try:
        app.state.store = PgRecordStore(create_session_factory(engine))
        if SETTINGS.seed_catalog:
            await seed_catalog(app.state.store)
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


app = FastAPI(
    title="signlearn-api",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials="*" not in SETTINGS.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last-added runs first: RequestContext -> Metrics -> CORS -> route.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

install_error_handlers(app)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(progress_router)
app.include_router(courses_router)
app.include_router(packages_router)
app.include_router(analytics_router)

logger.info(
    "signlearn-api started  env=%s log_level=%s port=%d store=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "postgres" if SETTINGS.database_url else "memory",
)


def run() -> None:
    """Serve the app on SETTINGS.port (``signlearn-api`` console script)."""
    uvicorn.run(
        "signlearn.main:app",
        host="0.0.0.0",
        port=SETTINGS.port,
        log_config=None,
        reload=SETTINGS.is_dev,
    )


if __name__ == "__main__":
    run()
