from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from app.core.config import SETTINGS


class PasswordService:
    """One-way adaptive password hashing (Argon2id).

    `cost` is Argon2's time cost: the number of passes over memory.
    Raising it makes every hash proportionally slower to compute.
    """

    def __init__(
        self,
        cost: int = SETTINGS.password_hash_cost,
        *,
        memory_cost: int | None = None,
        parallelism: int | None = None,
    ) -> None:
        kwargs: dict[str, int] = {"time_cost": cost}
        if memory_cost is not None:
            kwargs["memory_cost"] = memory_cost
        if parallelism is not None:
            kwargs["parallelism"] = parallelism
        self._ph = PasswordHasher(**kwargs)

    def hash(self, plain_password: str) -> str:
        if not plain_password:
            raise ValueError("password must be non-empty")
        return self._ph.hash(plain_password)

    # verify() must catch Argon2 exceptions and return False
    def verify(self, plain_password: str, password_hash: str) -> bool:
        if not plain_password or not password_hash:
            return False
        try:
            return self._ph.verify(password_hash, plain_password)
        except (VerifyMismatchError, VerificationError, InvalidHash):
            return False


password_service = PasswordService()
