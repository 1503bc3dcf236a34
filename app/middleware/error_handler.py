"""Exception -> JSON envelope conversion, registered once on the app.

Every failure leaves the service as

  {"success": false, "message": ..., "error": {"code": ..., "message": ...}}

with the HTTP status taken from the AppError.  Framework exceptions
(unknown route, wrong method, request-body validation) are mapped to an
AppError first so they render identically.  Outside production the
formatted traceback of a raised exception is added as error.stack.

Logging:
  operational AppError  -> WARNING, no traceback
  anything else         -> ERROR, with traceback
Both carry request id, method, url, code and a UTC timestamp.
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import SETTINGS, Settings
from app.core.errors import AppError
from app.core.logging import request_id_var
from app.core.responses import fail, to_json_response

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Endpoint no encontrado"

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


def _log_error(request: Request, err: AppError, exc: BaseException) -> None:
    context = {
        "request_id": request_id_var.get(),
        "method": request.method,
        "url": str(request.url),
        "error_code": err.code,
        "status_code": err.status_code,
    }
    timestamp = datetime.now(timezone.utc).isoformat()
    if err.is_operational:
        logger.warning(
            "%s %s failed: %s (%s) at %s",
            request.method,
            request.url.path,
            err.message,
            err.code,
            timestamp,
            extra=context,
        )
    else:
        logger.error(
            "Unhandled error on %s %s: %s at %s",
            request.method,
            request.url.path,
            exc,
            timestamp,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra=context,
        )


def _original_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _stack(exc: BaseException, settings: Settings) -> str | None:
    # Errors built from framework signals were never raised: no trace.
    if settings.is_prod or exc.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def render_error(
    request: Request,
    err: AppError,
    exc: BaseException | None = None,
    *,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
    settings: Settings | None = None,
) -> JSONResponse:
    """Log `err` and build its envelope response.

    `exc` is the exception actually raised when it is not `err` itself
    (e.g. the unexpected error behind an AppError.internal()).
    """
    source = exc if exc is not None else err
    _log_error(request, err, source)
    envelope = fail(
        err.message,
        err.code,
        detail=detail,
        stack=_stack(source, settings or SETTINGS),
    )
    return to_json_response(envelope, err.status_code, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return render_error(request, exc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        # No route matched: the catch-all 404 envelope.
        err = AppError.not_found(NOT_FOUND_MESSAGE)
        return render_error(
            request, err, detail=f"Ruta {_original_url(request)} no existe"
        )

    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    err = AppError(str(exc.detail), exc.status_code, code)
    return render_error(request, err, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e['loc'] if p != 'body')}: {e['msg']}"
        for e in exc.errors()
    )
    err = AppError.validation(f"Datos de entrada inválidos: {problems}")
    return render_error(request, err)


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    return render_error(request, AppError.internal(), exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
