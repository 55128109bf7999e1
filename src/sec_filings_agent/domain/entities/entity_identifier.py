# src/sec_filings_agent/domain/entities/entity_identifier.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR entity identifier (CIK) forms.

Purpose:
    A CIK is carried as a string. Two representations are in play and must
    not be confused:

    * Canonical form: decimal digits without leading zeros (``"320193"``).
      Used as a cache key and in archive document URLs.
    * Padded form: canonical form left-padded to 10 digits
      (``"0000320193"``). Used only in submissions request paths.

Layer:
    domain
"""

from __future__ import annotations

from typing import Final

from sec_filings_agent.domain.exceptions.edgar import EdgarValidationError

CIK_PADDED_WIDTH: Final[int] = 10


def canonical_cik(cik: str | int) -> str:
    """Return the canonical decimal string form of a CIK.

    Args:
        cik: CIK as an integer or a digit string (leading zeros allowed,
            surrounding whitespace ignored).

    Returns:
        The CIK with leading zeros stripped (``"0"`` for an all-zero input).

    Raises:
        EdgarValidationError: If the value is not a non-negative integer.
    """
    if isinstance(cik, bool):
        raise EdgarValidationError("CIK must be numeric.", details={"cik": cik})
    if isinstance(cik, int):
        if cik < 0:
            raise EdgarValidationError("CIK must not be negative.", details={"cik": cik})
        return str(cik)

    cleaned = cik.strip()
    if not cleaned or not (cleaned.isascii() and cleaned.isdigit()):
        raise EdgarValidationError("CIK must contain only digits.", details={"cik": cik})
    return str(int(cleaned))


def padded_cik(cik: str | int) -> str:
    """Return the 10-digit zero-padded form used in submissions URLs."""
    return canonical_cik(cik).zfill(CIK_PADDED_WIDTH)


def accession_no_dashes(accession_number: str) -> str:
    """Strip dashes from an accession number (``0000320193-24-000123`` → ``000032019324000123``)."""
    return accession_number.replace("-", "")
