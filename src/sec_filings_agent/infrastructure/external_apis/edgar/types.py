# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""
EDGAR Types.

Purpose:
    Provide typed rows for the EDGAR company tickers table.

Layer:
    infrastructure

Notes:
    Only the ticker table is typed here: every row is used, so it is
    validated with Pydantic. Submissions documents carry many more keys than
    we read and are checked field by field in ``mappers.py``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class CompanyTickerRow(BaseModel):
    """Single row of ``company_tickers.json``."""

    model_config = ConfigDict(extra="ignore")

    cik_str: int
    ticker: str
    title: str | None = None


#: ``company_tickers.json`` is an object keyed by an opaque row index.
COMPANY_TICKERS_ADAPTER: TypeAdapter[dict[str, CompanyTickerRow]] = TypeAdapter(
    dict[str, CompanyTickerRow]
)
