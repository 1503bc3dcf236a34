from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.users import router as users_router
from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.db.engine import lifespan_db
from app.middleware.error_handler import register_exception_handlers
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import RequestContextMiddleware
from app.middleware.security import (
    BodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        logger.info(
            "ats-api ready  env=%s port=%d origins=%s",
            SETTINGS.environment_name,
            SETTINGS.port,
            ",".join(SETTINGS.allowed_origins),
        )
        yield


app = FastAPI(
    title="ats-api",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs" if SETTINGS.is_dev else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware execution order: last-added runs first (outermost layer).
# SecurityHeaders (outermost) → RequestContext → Metrics → BodySizeLimit
# → CORS → route handler
app.add_middleware(BodySizeLimitMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

register_exception_handlers(app)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(users_router)


def run() -> None:
    """Console entry point: serve the app on SETTINGS.port."""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=SETTINGS.port,
        log_config=None,  # keep the handlers installed by setup_logging()
    )


if __name__ == "__main__":
    run()
