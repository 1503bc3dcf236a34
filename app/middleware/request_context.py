"""Request context middleware.

Gives every request an id (the client's X-Request-ID, or a fresh UUID),
stores it in `request_id_var` so every log line emitted while handling
the request carries it, logs one summary line when the response is
ready, and echoes the id back in the X-Request-ID response header.

A ContextVar rather than a thread-local: concurrent requests share the
event loop thread, and each asyncio task gets its own context copy.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.core.errors import AppError
from app.core.logging import request_id_var
from app.middleware.error_handler import render_error

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        token = request_id_var.set(req_id)
        try:
            start = time.monotonic()
            try:
                response = await call_next(request)
            except Exception as exc:
                # Render here, while the request id is still bound, instead
                # of in the server error layer outside this middleware.
                response = render_error(request, AppError.internal(), exc)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            logger.info(
                "%s %s → %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={
                    "request_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

            response.headers["X-Request-ID"] = req_id
            return response
        finally:
            request_id_var.reset(token)
