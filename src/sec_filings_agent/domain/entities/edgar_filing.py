# src/sec_filings_agent/domain/entities/edgar_filing.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR filing record entity.

Purpose:
    Represent a single filing from a company's "recent filings" window in
    row form, as produced by the filing normalizer.

Layer:
    domain

Notes:
    Fields mirror the upstream column names one-to-one so the mapping from a
    positional slice is lossless. Only the accession number, filing date and
    form are guaranteed; everything else may be ``None``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from sec_filings_agent.domain.exceptions.edgar import EdgarMappingError


@dataclass(frozen=True)
class FilingRecord:
    """One normalized EDGAR filing.

    Args:
        accession_number: Unique accession number with dashes
            (e.g., ``"0000320193-24-000123"``).
        filing_date: Filing date as reported (``YYYY-MM-DD``).
        form: Form type code (e.g., ``"10-K"``, ``"4"``).
        report_date: Period of report, if any.
        acceptance_date_time: EDGAR acceptance timestamp, if any.
        act: Securities act designation, if any.
        file_number: SEC file number, if any.
        film_number: Film number, if any.
        items: Item codes (8-K items), if any.
        size: Submission size in bytes, if any.
        is_xbrl: 1 when the filing carries XBRL, if reported.
        is_inline_xbrl: 1 when the filing carries inline XBRL, if reported.
        primary_document: Primary document filename, if any.
        primary_doc_description: Primary document description, if any.

    Raises:
        EdgarMappingError: If the accession number is empty.
    """

    accession_number: str
    filing_date: str
    form: str
    report_date: str | None = None
    acceptance_date_time: str | None = None
    act: str | None = None
    file_number: str | None = None
    film_number: str | None = None
    items: str | None = None
    size: int | None = None
    is_xbrl: int | None = None
    is_inline_xbrl: int | None = None
    primary_document: str | None = None
    primary_doc_description: str | None = None

    def __post_init__(self) -> None:
        """Validate the identifying field."""
        if not isinstance(self.accession_number, str) or not self.accession_number.strip():
            raise EdgarMappingError(
                "accession_number must not be empty.",
                details={"accession_number": self.accession_number},
            )

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict (snake_case keys)."""
        return asdict(self)
