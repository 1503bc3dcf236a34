from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    allowed_origins: tuple[str, ...] = ("http://localhost:3001",)
    password_hash_cost: int = 3

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def environment_name(self) -> str:
        return {"dev": "development", "test": "test", "prod": "production"}[
            self.app_env
        ]


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ValueError(f"{name} must be true|false (got {raw!r})")


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "3000")
    cost_raw = _getenv("PASSWORD_HASH_COST", "3")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        password_hash_cost = int(cost_raw)
    except ValueError:
        raise ValueError(
            f"PASSWORD_HASH_COST must be an integer (got {cost_raw!r})"
        ) from None
    if password_hash_cost < 1:
        raise ValueError(
            f"PASSWORD_HASH_COST must be >= 1 (got {password_hash_cost})"
        )

    log_json = _parse_bool("LOG_JSON", _getenv("LOG_JSON", "false"))
    database_url = _getenv("DATABASE_URL", "") or None

    origins_raw = _getenv("ALLOWED_ORIGINS", "http://localhost:3001")
    allowed_origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip())

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json,
        port=port,
        database_url=database_url,
        allowed_origins=allowed_origins,
        password_hash_cost=password_hash_cost,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
