"""Liveness endpoint.

/health answers "is the process up?" only.  It touches no backing
service, so it reports OK regardless of database state.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.core import config

router = APIRouter(tags=["health"])


class HealthOut(BaseModel):
    status: str
    timestamp: str
    environment: str


@router.get("/health", response_model=HealthOut)
async def health() -> HealthOut:
    return HealthOut(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        environment=config.SETTINGS.environment_name,
    )
