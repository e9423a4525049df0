"""Request context middleware: a request id for every request.

Concurrent requests interleave their log lines.  The request id (taken
from ``X-Request-ID`` or generated) and the authenticated principal are
held in context variables and stamped onto every LogRecord by a record
factory, so any line can be traced back to one request and
one caller.

Context variables rather than thread-locals: async requests share a
thread, and each task gets its own copy of a ContextVar.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

# Set by the auth dependencies once the bearer token is validated.
principal_var: ContextVar[str] = ContextVar("principal", default="-")


def _install_record_factory() -> None:
    """Stamp request_id and principal onto every LogRecord, from any logger."""
    current = logging.getLogRecordFactory()
    if getattr(current, "_passport_context", False):
        return

    def factory(*args, **kwargs) -> logging.LogRecord:
        record = current(*args, **kwargs)
        record.request_id = request_id_var.get()
        record.principal = principal_var.get()
        return record

    factory._passport_context = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(factory)


_install_record_factory()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, time the request, log one completion line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)
        principal_var.set("-")

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
