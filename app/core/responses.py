"""Standard JSON envelope shared by every API endpoint.

  success:  {"success": true,  "message"?: str, "data"?: T}
  failure:  {"success": false, "message": str,
             "error": {"code": str, "message": str, "stack"?: str},
             "data"?: T}

Routes build the envelope value with ok() / fail() and hand it back to
FastAPI (response_model=ApiResponse[...]); exception handlers wrap it
with to_json_response().  Optional keys are omitted, not sent as null.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ErrorBody(BaseModel):
    code: str
    message: str
    stack: str | None = None


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    message: str | None = None
    data: T | None = None
    error: ErrorBody | None = None


def ok(data: Any = None, message: str | None = None) -> ApiResponse[Any]:
    return ApiResponse(success=True, message=message, data=data)


def fail(
    message: str,
    code: str = "GENERIC_ERROR",
    *,
    detail: str | None = None,
    data: Any = None,
    stack: str | None = None,
) -> ApiResponse[Any]:
    """Failure envelope. `detail` overrides error.message when it differs."""
    return ApiResponse(
        success=False,
        message=message,
        error=ErrorBody(
            code=code,
            message=detail if detail is not None else message,
            stack=stack,
        ),
        data=data,
    )


def to_json_response(
    envelope: ApiResponse[Any],
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True, by_alias=True),
        headers=headers,
    )
