"""Prometheus scrape endpoint.

Returns the text exposition format (not the JSON envelope), e.g.:

  # TYPE user_registrations_total counter
  user_registrations_total{outcome="created"} 12.0
  user_registrations_total{outcome="EMAIL_ALREADY_EXISTS"} 3.0
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose all Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
