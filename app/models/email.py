from __future__ import annotations

import re
from dataclasses import dataclass

from app.core.errors import AppError

EMAIL_MAX_LENGTH = 255

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True, slots=True)
class Email:
    """Normalized, validated email address.

    Equality and hashing use the normalized value, so
    Email.create("A@X.io") == Email.create(" a@x.io ").
    """

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().lower()

        if not normalized:
            raise AppError.bad_request("Email es requerido", "INVALID_EMAIL")

        if not _EMAIL_RE.match(normalized):
            raise AppError.bad_request(
                "Formato de email inválido", "INVALID_EMAIL_FORMAT"
            )

        if len(normalized) > EMAIL_MAX_LENGTH:
            raise AppError.bad_request("Email demasiado largo", "EMAIL_TOO_LONG")

        object.__setattr__(self, "value", normalized)

    @classmethod
    def create(cls, raw: str) -> Email:
        return cls(raw)

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    @property
    def local_part(self) -> str:
        return self.value.split("@", 1)[0]

    def __str__(self) -> str:
        return self.value
