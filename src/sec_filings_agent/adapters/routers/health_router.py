# src/sec_filings_agent/adapters/routers/health_router.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Health endpoint (Adapters Layer).

Purpose:
    Liveness signal for container orchestrators. It does not call EDGAR, so
    it stays green while the user agent is unset or upstream is down.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from sec_filings_agent.adapters.schemas.http import HealthHTTP
from sec_filings_agent.config import Settings, get_settings

router = APIRouter(tags=["Health"])


@router.get(
    "/healthz",
    response_model=HealthHTTP,
    summary="Liveness probe",
    operation_id="healthz",
)
async def healthz(settings: Annotated[Settings, Depends(get_settings)]) -> HealthHTTP:
    """Return a static OK with the agent identity."""
    return HealthHTTP(status="ok", agent=settings.agent_name, version=settings.agent_version)
