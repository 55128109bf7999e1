# src/sec_filings_agent/domain/services/filing_normalizer.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR recent-filings normalization.

Purpose:
    Turn the column-oriented ``filings.recent`` section of a submissions
    snapshot into row-oriented ``FilingRecord`` values, plus the small pure
    helpers callers apply on top (form filtering, ordering guard, primary
    document URL).

Layer:
    domain

Design:
    - ``normalize_recent_filings`` never reorders, filters or deduplicates.
      Filtering by form and limiting are the caller's job.
    - Row count comes from the accession number column. Optional columns are
      read positionally and yield ``None`` when absent or too short.
    - Upstream lists filings most-recent-first. ``ensure_most_recent_first``
      checks that instead of trusting it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Final

from sec_filings_agent.domain.entities.edgar_filing import FilingRecord
from sec_filings_agent.domain.entities.entity_identifier import (
    accession_no_dashes,
    canonical_cik,
)
from sec_filings_agent.domain.entities.submissions import RecentFilingsColumns
from sec_filings_agent.domain.exceptions.edgar import PermanentUpstreamError

ARCHIVES_BASE_URL: Final[str] = "https://www.sec.gov/Archives/edgar/data"

#: Insider transaction forms (initial, change, annual statement of ownership).
INSIDER_FORMS: Final[frozenset[str]] = frozenset({"3", "4", "5"})

_OPTIONAL_COLUMNS: Final[tuple[str, ...]] = (
    "report_date",
    "acceptance_date_time",
    "act",
    "file_number",
    "film_number",
    "items",
    "size",
    "is_xbrl",
    "is_inline_xbrl",
    "primary_document",
    "primary_doc_description",
)


def _at(column: Sequence[Any] | None, index: int) -> Any:
    if column is None or index >= len(column):
        return None
    return column[index]


def normalize_recent_filings(recent: RecentFilingsColumns | None) -> list[FilingRecord]:
    """Convert recent-filings columns into an ordered list of records.

    Args:
        recent: Column section of a snapshot, or ``None`` when absent.

    Returns:
        One record per accession number, in upstream order.
    """
    if recent is None:
        return []

    records: list[FilingRecord] = []
    for i, accession in enumerate(recent.accession_number):
        optional = {name: _at(getattr(recent, name), i) for name in _OPTIONAL_COLUMNS}
        records.append(
            FilingRecord(
                accession_number=accession,
                filing_date=recent.filing_date[i],
                form=recent.form[i],
                **optional,
            )
        )
    return records


def normalize_forms(forms: Iterable[str] | None) -> frozenset[str] | None:
    """Return an uppercase form set, or ``None`` when no filter applies."""
    if not forms:
        return None
    cleaned = frozenset(f.strip().upper() for f in forms if f and f.strip())
    return cleaned or None


def filter_by_forms(
    records: Iterable[FilingRecord],
    forms: Iterable[str] | None,
) -> list[FilingRecord]:
    """Keep records whose form is in ``forms`` (case-insensitive).

    An empty or ``None`` filter keeps everything. Order is preserved.
    """
    wanted = normalize_forms(forms)
    if wanted is None:
        return list(records)
    return [r for r in records if r.form.upper() in wanted]


def _order_keys(prev: FilingRecord, cur: FilingRecord) -> tuple[str, str, str]:
    """Return the field both records are ordered by and its two values.

    Upstream sorts by acceptance time. Filings accepted after the evening
    cutoff carry the next business day's filing date, so the filing date is
    only used when either record lacks an acceptance time.
    """
    if prev.acceptance_date_time and cur.acceptance_date_time:
        return "acceptance_date_time", prev.acceptance_date_time, cur.acceptance_date_time
    return "filing_date", prev.filing_date, cur.filing_date


def ensure_most_recent_first(records: Sequence[FilingRecord]) -> None:
    """Verify that records never get more recent along the sequence.

    Raises:
        PermanentUpstreamError: On the first pair found out of order.
    """
    for prev, cur in zip(records, records[1:]):
        key, prev_value, cur_value = _order_keys(prev, cur)
        if cur_value > prev_value:
            raise PermanentUpstreamError(
                "EDGAR recent filings are not ordered most-recent-first.",
                details={
                    "key": key,
                    "previous": {"accession": prev.accession_number, key: prev_value},
                    "next": {"accession": cur.accession_number, key: cur_value},
                },
            )


def build_primary_doc_url(cik: str | int, accession_number: str, primary_document: str) -> str:
    """Build the archive URL of a filing's primary document.

    The CIK segment is the canonical (unpadded) form; only the accession
    segment has its dashes stripped.
    """
    return (
        f"{ARCHIVES_BASE_URL}/{canonical_cik(cik)}/"
        f"{accession_no_dashes(accession_number)}/{primary_document}"
    )


def primary_doc_url_for(cik: str | int, record: FilingRecord) -> str | None:
    """Return the primary document URL for ``record`` when it can be built."""
    if not record.primary_document or not record.accession_number:
        return None
    return build_primary_doc_url(cik, record.accession_number, record.primary_document)
