"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the filings, health and metrics
    routers. The FastAPI application imports these names during startup.

Layer:
    adapters/routers
"""

from __future__ import annotations

from .filings_router import router as filings  # noqa: F401
from .health_router import router as health  # noqa: F401
from .metrics_router import router as metrics  # noqa: F401

__all__ = ["filings", "health", "metrics"]
