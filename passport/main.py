from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from passport.api.commitments import router as commitments_router
from passport.api.credentials import router as credentials_router
from passport.api.health import router as health_router
from passport.api.issuers import router as issuers_router
from passport.api.metrics_endpoint import router as metrics_router
from passport.api.proofs import router as proofs_router
from passport.core.config import SETTINGS
from passport.core.logging import setup_logging
from passport.db.engine import lifespan_db
from passport.middleware.metrics import MetricsMiddleware
from passport.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        yield


app = FastAPI(
    title="credentials-passport",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Last-added runs first: RequestContext (outermost) -> Metrics -> route
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(commitments_router)
app.include_router(credentials_router)
app.include_router(proofs_router)
app.include_router(issuers_router)

logger.info(
    "credentials-passport started  env=%s log_level=%s port=%d ledger=%s docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "postgres" if SETTINGS.database_url else "in-memory",
    "on" if SETTINGS.is_dev else "off",
)
