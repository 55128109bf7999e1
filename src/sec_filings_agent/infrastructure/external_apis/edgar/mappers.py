# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR payload → domain mappers.

Purpose:
    Map raw EDGAR JSON into domain values:

    * ``company_tickers.json`` → ticker index (uppercase symbol → canonical CIK).
    * ``submissions/CIK##########.json`` → ``SubmissionsSnapshot``.

Layer:
    infrastructure

Notes:
    Shape problems raise ``EdgarMappingError`` so callers see one error type
    for "upstream sent something we cannot use".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from pydantic import ValidationError

from sec_filings_agent.domain.entities.submissions import (
    RecentFilingsColumns,
    SubmissionsSnapshot,
)
from sec_filings_agent.domain.exceptions.edgar import EdgarMappingError
from sec_filings_agent.infrastructure.external_apis.edgar.types import COMPANY_TICKERS_ADAPTER

# Upstream column name → RecentFilingsColumns field.
_OPTIONAL_COLUMN_MAP: Final[dict[str, str]] = {
    "reportDate": "report_date",
    "acceptanceDateTime": "acceptance_date_time",
    "act": "act",
    "fileNumber": "file_number",
    "filmNumber": "film_number",
    "items": "items",
    "size": "size",
    "isXBRL": "is_xbrl",
    "isInlineXBRL": "is_inline_xbrl",
    "primaryDocument": "primary_document",
    "primaryDocDescription": "primary_doc_description",
}


def ticker_index_from_payload(payload: Any) -> dict[str, str]:
    """Build the ticker index from the bulk ticker table.

    Duplicate symbols (e.g., share classes listed under one symbol) are not
    expected; when they occur the last row seen wins, silently.

    Raises:
        EdgarMappingError: If the payload does not match the table shape.
    """
    try:
        rows = COMPANY_TICKERS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise EdgarMappingError(
            "EDGAR company tickers payload has an unexpected shape.",
            details={"errors": exc.error_count()},
        ) from exc

    index: dict[str, str] = {}
    for row in rows.values():
        index[row.ticker.strip().upper()] = str(row.cik_str)
    return index


def _column(section: Mapping[str, Any], key: str) -> tuple[Any, ...] | None:
    raw = section.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise EdgarMappingError(
            f"EDGAR recent filings column '{key}' must be a list.",
            details={"column": key, "type": type(raw).__name__},
        )
    return tuple(raw)


def _required_str_column(section: Mapping[str, Any], key: str) -> tuple[str, ...]:
    values = _column(section, key)
    if values is None:
        raise EdgarMappingError(
            f"EDGAR recent filings missing '{key}' column.",
            details={"column": key},
        )
    if not all(isinstance(v, str) for v in values):
        raise EdgarMappingError(
            f"EDGAR recent filings column '{key}' must contain strings.",
            details={"column": key},
        )
    return values


def recent_columns_from_payload(section: Any) -> RecentFilingsColumns | None:
    """Map the ``filings.recent`` section, or return ``None`` when absent."""
    if section is None:
        return None
    if not isinstance(section, Mapping):
        raise EdgarMappingError(
            "EDGAR recent filings section must be an object.",
            details={"type": type(section).__name__},
        )

    optional = {field: _column(section, key) for key, field in _OPTIONAL_COLUMN_MAP.items()}
    return RecentFilingsColumns(
        accession_number=_required_str_column(section, "accessionNumber"),
        filing_date=_required_str_column(section, "filingDate"),
        form=_required_str_column(section, "form"),
        **optional,
    )


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def snapshot_from_payload(payload: Any) -> SubmissionsSnapshot:
    """Map a submissions document into a ``SubmissionsSnapshot``.

    Raises:
        EdgarMappingError: If the document is not an object, lacks ``cik``,
            or carries a malformed recent-filings section.
    """
    if not isinstance(payload, Mapping):
        raise EdgarMappingError(
            "EDGAR submissions JSON must be an object.",
            details={"type": type(payload).__name__},
        )

    raw_cik = payload.get("cik")
    if isinstance(raw_cik, int) and not isinstance(raw_cik, bool):
        raw_cik = str(raw_cik)
    if not isinstance(raw_cik, str) or not raw_cik.strip():
        raise EdgarMappingError(
            "EDGAR submissions JSON missing 'cik' field.",
            details={"cik": raw_cik},
        )

    filings = payload.get("filings") or {}
    if not isinstance(filings, Mapping):
        raise EdgarMappingError("EDGAR submissions 'filings' must be an object.")

    tickers = payload.get("tickers") or []
    former_names = payload.get("formerNames") or []
    addresses = payload.get("addresses") or {}

    return SubmissionsSnapshot(
        cik=raw_cik.strip(),
        name=_opt_str(payload.get("name")),
        tickers=tuple(t for t in tickers if isinstance(t, str)) if isinstance(tickers, list) else (),
        recent=recent_columns_from_payload(filings.get("recent")),
        sic_description=_opt_str(payload.get("sicDescription")),
        category=_opt_str(payload.get("category")),
        entity_type=_opt_str(payload.get("entityType")),
        fiscal_year_end=_opt_str(payload.get("fiscalYearEnd")),
        state_of_incorporation=_opt_str(payload.get("stateOfIncorporation")),
        phone=_opt_str(payload.get("phone")),
        website=_opt_str(payload.get("website")),
        addresses=dict(addresses) if isinstance(addresses, Mapping) else {},
        former_names=(
            tuple(n for n in former_names if isinstance(n, Mapping))
            if isinstance(former_names, list)
            else ()
        ),
    )
