# src/sec_filings_agent/main.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and routers.
    Provides an application factory (``create_app``) and a module-level eager
    app (``app``) for ASGI servers and tooling.

Design:
    • Bootstrap only (no business logic).
    • Root JSON logging configured at import time.
    • Lifespan closes the shared EDGAR HTTP client on shutdown.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRoute

from sec_filings_agent.adapters.routers import filings, health, metrics
from sec_filings_agent.config import Settings, get_settings
from sec_filings_agent.dependencies.edgar import get_filings_service
from sec_filings_agent.infrastructure.http.errors import register_exception_handlers
from sec_filings_agent.infrastructure.http.middleware.request_id import RequestIdMiddleware
from sec_filings_agent.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId: ``"<methods>_<path>"``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Release the process-wide filings service on shutdown."""
    yield
    if get_filings_service.cache_info().currsize:
        await get_filings_service().aclose()
        get_filings_service.cache_clear()
        logger.info("service_shutdown", extra={"status": "edgar_client_closed"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings: Settings = get_settings()
    if settings.log_level:
        configure_root_logging(settings.log_level)

    app = FastAPI(
        title="SEC Filings Agent",
        version=settings.agent_version,
        description="Resilient EDGAR read-through client and filing change streams.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
    )

    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    app.include_router(health)
    app.include_router(metrics)
    app.include_router(filings)

    logger.info(
        "service_startup",
        extra={
            "service": settings.agent_name,
            "env": settings.environment.value,
            "version": settings.agent_version,
            "status": "starting",
        },
    )
    return app


# Eager app for ASGI servers and tools.
app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "sec_filings_agent.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
    )
