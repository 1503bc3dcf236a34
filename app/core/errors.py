"""Application error taxonomy.

AppError is the only failure shape that crosses a service boundary.
Business rules raise it at the point of violation; the error handler in
app/middleware/error_handler.py catches it once and renders the JSON
envelope.

  is_operational=True   expected outcome (bad input, duplicate email);
                        logged at WARNING, never alerts
  is_operational=False  unexpected fault; logged at ERROR with traceback
"""

from __future__ import annotations

import traceback
from typing import Any


class AppError(Exception):
    """Classified failure carrying an HTTP status and a stable code."""

    __slots__ = ("_message", "_status_code", "_code", "_is_operational")

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        is_operational: bool = True,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._status_code = status_code
        self._code = code
        self._is_operational = is_operational

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def code(self) -> str:
        return self._code

    @property
    def is_operational(self) -> bool:
        return self._is_operational

    def __repr__(self) -> str:
        return (
            f"AppError(message={self._message!r}, status_code={self._status_code}, "
            f"code={self._code!r}, is_operational={self._is_operational})"
        )

    # --- Named constructors ------------------------------------------------

    @classmethod
    def bad_request(cls, message: str, code: str = "BAD_REQUEST") -> AppError:
        return cls(message, 400, code)

    @classmethod
    def unauthorized(
        cls, message: str = "No autorizado", code: str = "UNAUTHORIZED"
    ) -> AppError:
        return cls(message, 401, code)

    @classmethod
    def forbidden(
        cls, message: str = "Acceso prohibido", code: str = "FORBIDDEN"
    ) -> AppError:
        return cls(message, 403, code)

    @classmethod
    def not_found(
        cls, message: str = "Recurso no encontrado", code: str = "NOT_FOUND"
    ) -> AppError:
        return cls(message, 404, code)

    @classmethod
    def conflict(cls, message: str, code: str = "CONFLICT") -> AppError:
        return cls(message, 409, code)

    @classmethod
    def validation(cls, message: str, code: str = "VALIDATION_ERROR") -> AppError:
        return cls(message, 422, code)

    @classmethod
    def internal(
        cls,
        message: str = "Error interno del servidor",
        code: str = "INTERNAL_ERROR",
    ) -> AppError:
        return cls(message, 500, code, is_operational=False)

    # --- Serialization -----------------------------------------------------

    def stack(self) -> str | None:
        """Formatted traceback, or None if the error was never raised."""
        if self.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(self))

    def to_dict(self, *, include_stack: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "message": self._message,
            "statusCode": self._status_code,
            "code": self._code,
            "isOperational": self._is_operational,
        }
        if include_stack:
            data["stack"] = self.stack()
        return data
