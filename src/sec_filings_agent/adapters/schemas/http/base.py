# src/sec_filings_agent/adapters/schemas/http/base.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Shared Pydantic base for the filings HTTP bodies and responses.

Request bodies reject unknown keys so a misspelled ``poll_interval_s`` or
``forms`` fails loudly with a 422 instead of silently using the default.
Non-finite floats are written as ``null``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Strict base for every model under ``adapters.schemas.http``."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        ser_json_inf_nan="null",
    )
