"""
Request correlation and access logging.

Every request gets an ``X-Correlation-ID`` (taken from the request or
generated). The ID is echoed on the response and tagged onto render logs so a
queued job can be traced back to the request that submitted it.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("pdf_service.access")

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the request being handled, if any."""
    return _correlation_id.get()


class CorrelationMiddleware(BaseHTTPMiddleware):
    CORRELATION_HEADER = "X-Correlation-ID"

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(self.CORRELATION_HEADER) or str(uuid.uuid4())
        token = _correlation_id.set(correlation_id)
        request.state.correlation_id = correlation_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        finally:
            _correlation_id.reset(token)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"[{correlation_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.2f}ms)"
        )
        response.headers[self.CORRELATION_HEADER] = correlation_id
        return response
