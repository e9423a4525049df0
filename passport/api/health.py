"""Health and readiness endpoints.

/health (liveness): the process responds.  Always 200; ``status`` says
whether the ledger is reachable ("ok") or not ("degraded").  A slow
ledger must not get the container restarted.

/ready (readiness): 503 while a configured ledger database is
unreachable, so the load balancer stops routing here until it recovers.
The in-memory ledger is always ready.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from passport.db import engine as db

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


async def _ledger_check() -> str:
    if db.engine is None:
        return "in_memory"
    try:
        async with db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (DBAPIError, OSError) as e:
        logger.warning("Ledger database check failed: %s", e.__class__.__name__)
        return "degraded"
    return "ok"


@router.get("/health")
async def health() -> dict:
    ledger = await _ledger_check()
    return {
        "status": "degraded" if ledger == "degraded" else "ok",
        "checks": {"ledger": ledger},
    }


@router.get("/ready")
async def ready() -> Response:
    if await _ledger_check() == "degraded":
        return Response(status_code=503)
    return Response(status_code=200)
