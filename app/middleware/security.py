"""Security headers and request body size cap.

SecurityHeadersMiddleware sets the usual hardening headers on every
response (without overriding ones a route already chose); HSTS is only
sent in production, where the service sits behind TLS.

BodySizeLimitMiddleware rejects requests whose declared Content-Length
exceeds MAX_BODY_BYTES with a 413 envelope before the body is read.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import SETTINGS
from app.core.errors import AppError
from app.middleware.error_handler import render_error

MAX_BODY_BYTES = 10 * 1024 * 1024

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}

HSTS_VALUE = "max-age=15552000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if SETTINGS.is_prod:
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_body_bytes: int = MAX_BODY_BYTES) -> None:
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit():
            if int(declared) > self.max_body_bytes:
                err = AppError(
                    "Cuerpo de la petición demasiado grande",
                    413,
                    "PAYLOAD_TOO_LARGE",
                )
                return render_error(request, err)
        return await call_next(request)
