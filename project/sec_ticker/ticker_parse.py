# ticker_parse.py
# ------------------------------------------------------------------
# Parser for the SEC ticker.txt wire format.
#
# Format: newline-delimited records, each "<ticker>\t<cik>", no header.
#
# A bad record never aborts the parse:
#   - wrong number of tab-separated fields -> record skipped
#   - CIK not an unsigned 64-bit integer   -> CIK recorded as 0
# Only spaces and a trailing "\r" are trimmed; tabs are never stripped,
# so "aapl\t" is a two-field record with an empty CIK.
# Both cases are logged at WARNING and returned as RecordIssue entries
# so callers can inspect feed quality without scraping logs.
# ------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

_logger = logging.getLogger(__name__)

# Upper bound (exclusive) for an unsigned 64-bit CIK
_CIK_LIMIT = 2 ** 64

ISSUE_FIELD_COUNT = "field_count"
ISSUE_CIK = "cik"


@dataclass(frozen=True)
class RecordIssue:
    """One feed line that could not be taken at face value."""
    line_number: int
    record: str
    reason: str
    detail: str


def parse_cik(value: str) -> int:
    """
    Parse a CIK field as an unsigned 64-bit integer.

    Accepts ASCII digits with an optional leading '+'. Rejects signs,
    embedded whitespace, underscores and anything >= 2**64, all of which
    Python's int() would otherwise tolerate or accept.
    """
    digits = value[1:] if value.startswith("+") else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid digit found in {value!r}")
    cik = int(digits)
    if cik >= _CIK_LIMIT:
        raise ValueError(f"number too large to fit in 64 bits: {value!r}")
    return cik


def parse_ticker_text(text: str) -> Tuple[Dict[str, int], List[RecordIssue]]:
    """
    Parse ticker.txt content into a ticker -> CIK mapping.

    Duplicate tickers overwrite earlier entries (last write wins).

    Returns:
        (entries, issues) where ``entries`` preserves feed order of first
        insertion and ``issues`` lists every malformed record.
    """
    entries: Dict[str, int] = {}
    issues: List[RecordIssue] = []

    for line_number, raw in enumerate(text.split("\n"), start=1):
        record = raw.strip(" \r")
        if not record:
            continue

        fields = record.split("\t")
        if len(fields) != 2:
            detail = f"expected 2 tab-separated fields, got {len(fields)}"
            _logger.warning("Skipping malformed record %d %r: %s", line_number, record, detail)
            issues.append(RecordIssue(line_number, record, ISSUE_FIELD_COUNT, detail))
            continue

        ticker, cik_field = fields
        try:
            cik = parse_cik(cik_field)
        except ValueError as exc:
            _logger.warning("Could not parse CIK on record %d %r: %s", line_number, record, exc)
            issues.append(RecordIssue(line_number, record, ISSUE_CIK, str(exc)))
            cik = 0

        entries[ticker] = cik

    return entries, issues
