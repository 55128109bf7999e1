# src/sec_filings_agent/domain/entities/submissions.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR submissions snapshot entities.

Purpose:
    Represent one point-in-time fetch of an entity's filing history:
    identity, display metadata and the column-oriented "recent filings"
    section exactly as upstream ships it.

Layer:
    domain

Notes:
    A snapshot is a value. A newer snapshot for the same entity replaces an
    older one wholesale; nothing is merged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sec_filings_agent.domain.exceptions.edgar import EdgarMappingError

Column = tuple[Any, ...]


@dataclass(frozen=True)
class RecentFilingsColumns:
    """Parallel columns of the ``filings.recent`` section.

    Mandatory columns share one length. Optional columns may be ``None``
    (absent upstream); when present they are expected to share that length,
    but the normalizer tolerates shorter ones by substituting ``None``.

    Raises:
        EdgarMappingError: If the mandatory columns differ in length.
    """

    accession_number: tuple[str, ...]
    filing_date: tuple[str, ...]
    form: tuple[str, ...]
    report_date: Column | None = None
    acceptance_date_time: Column | None = None
    act: Column | None = None
    file_number: Column | None = None
    film_number: Column | None = None
    items: Column | None = None
    size: Column | None = None
    is_xbrl: Column | None = None
    is_inline_xbrl: Column | None = None
    primary_document: Column | None = None
    primary_doc_description: Column | None = None

    def __post_init__(self) -> None:
        """Check that the mandatory columns line up."""
        n = len(self.accession_number)
        if len(self.filing_date) != n or len(self.form) != n:
            raise EdgarMappingError(
                "Mandatory recent-filings columns differ in length.",
                details={
                    "accessionNumber": n,
                    "filingDate": len(self.filing_date),
                    "form": len(self.form),
                },
            )

    def __len__(self) -> int:
        return len(self.accession_number)


@dataclass(frozen=True)
class SubmissionsSnapshot:
    """Full known filing history of one entity at fetch time.

    Args:
        cik: Identifier exactly as upstream reports it (often zero-padded).
        name: Entity display name.
        tickers: Known ticker aliases.
        recent: Recent filings columns, or ``None`` when upstream omits them.
        sic_description: Industry classification description.
        category: Filer category (e.g., "Large Accelerated Filer").
        entity_type: Entity type (e.g., "operating").
        fiscal_year_end: Fiscal year end as ``MMDD``.
        state_of_incorporation: State or country code of incorporation.
        phone: Business phone number.
        website: Company website.
        addresses: Mailing/business addresses as shipped upstream.
        former_names: Former names as shipped upstream.
    """

    cik: str
    name: str | None = None
    tickers: tuple[str, ...] = ()
    recent: RecentFilingsColumns | None = None
    sic_description: str | None = None
    category: str | None = None
    entity_type: str | None = None
    fiscal_year_end: str | None = None
    state_of_incorporation: str | None = None
    phone: str | None = None
    website: str | None = None
    addresses: Mapping[str, Any] = field(default_factory=dict)
    former_names: tuple[Mapping[str, Any], ...] = ()
