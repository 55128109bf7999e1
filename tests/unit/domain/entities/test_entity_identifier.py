# tests/unit/domain/entities/test_entity_identifier.py
from __future__ import annotations

import pytest

from sec_filings_agent.domain.entities.entity_identifier import (
    accession_no_dashes,
    canonical_cik,
    padded_cik,
)
from sec_filings_agent.domain.exceptions.edgar import EdgarValidationError


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0000320193", "320193"),
        ("320193", "320193"),
        (" 320193 ", "320193"),
        (320193, "320193"),
        ("0000000000", "0"),
    ],
)
def test_canonical_cik_strips_leading_zeros(raw: str | int, expected: str) -> None:
    assert canonical_cik(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "32-0193", "-1", -1, True])
def test_canonical_cik_rejects_non_numeric(raw: object) -> None:
    with pytest.raises(EdgarValidationError):
        canonical_cik(raw)  # type: ignore[arg-type]


def test_padded_cik_is_ten_digits() -> None:
    assert padded_cik("320193") == "0000320193"
    assert padded_cik("0000320193") == "0000320193"


def test_padded_and_canonical_forms_describe_the_same_entity() -> None:
    assert canonical_cik(padded_cik("789019")) == "789019"


def test_accession_no_dashes() -> None:
    assert accession_no_dashes("0000320193-24-000123") == "000032019324000123"
