# directory.py
# ------------------------------------------------------------------
# In-memory ticker <-> CIK directory built from the SEC ticker feed.
#
# A TickerDirectory is a read-only snapshot: it is built once per fetch
# and never mutated, so one instance can be shared between threads.
#
# Lookups never raise on a miss. They return sentinels instead:
#   NOT_FOUND_CIK    = 0       (no ticker matched)
#   NOT_FOUND_TICKER = "none"  (no CIK matched)
#
# The CIK -> ticker direction uses a reverse index built alongside the
# primary mapping. When several tickers share a CIK (share classes,
# e.g. goog/googl) the first ticker in feed order is returned.
# ------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional

import pandas as pd

from sec_ticker.config import FetchConfig
from sec_ticker.ticker_fetch import fetch_ticker_text
from sec_ticker.ticker_parse import RecordIssue, parse_ticker_text

_logger = logging.getLogger(__name__)

NOT_FOUND_CIK = 0
NOT_FOUND_TICKER = "none"


def padded_cik(cik: int) -> str:
    """Zero-pad a CIK to the 10-digit form used in EDGAR URLs."""
    return str(cik).zfill(10)


class TickerDirectory(Mapping):
    """Read-only mapping of lower-case ticker -> CIK."""

    def __init__(self, entries: Mapping, issues: Iterable[RecordIssue] = ()):
        self._by_ticker: Dict[str, int] = dict(entries)
        self._by_cik: Dict[int, str] = {}
        for ticker, cik in self._by_ticker.items():
            self._by_cik.setdefault(cik, ticker)
        self._issues = tuple(issues)

    @classmethod
    def from_text(cls, text: str) -> "TickerDirectory":
        entries, issues = parse_ticker_text(text)
        return cls(entries, issues)

    # Mapping protocol

    def __getitem__(self, ticker: str) -> int:
        return self._by_ticker[ticker]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_ticker)

    def __len__(self) -> int:
        return len(self._by_ticker)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} tickers, {len(self._issues)} issues)"

    # Lookups

    def cik(self, ticker: str) -> int:
        """CIK for ``ticker`` in any case, or NOT_FOUND_CIK."""
        if not ticker:
            return NOT_FOUND_CIK
        return self._by_ticker.get(ticker.lower(), NOT_FOUND_CIK)

    def ticker(self, cik: int) -> str:
        """First ticker in feed order carrying ``cik``, or NOT_FOUND_TICKER."""
        return self._by_cik.get(cik, NOT_FOUND_TICKER)

    @property
    def issues(self) -> tuple:
        return self._issues

    def to_frame(self) -> pd.DataFrame:
        """
        Tabular view of the directory.

        Columns:
            ticker  (str)
            cik     (uint64)
            cik_str (10-digit zero-padded CIK)
        """
        df = pd.DataFrame(
            {
                "ticker": pd.Series(list(self._by_ticker.keys()), dtype="object"),
                "cik": pd.Series(list(self._by_ticker.values()), dtype="uint64"),
            }
        )
        df["cik_str"] = df["cik"].astype(str).str.zfill(10)
        return df


def fetch_directory(config: Optional[FetchConfig] = None) -> TickerDirectory:
    """
    Download and parse the SEC ticker feed.

    Args:
        config: Endpoint and HTTP settings. Defaults to FetchConfig().

    Returns:
        A fresh TickerDirectory.

    Raises:
        TickerFetchError: On transport failure or an undecodable body.
    """
    text = fetch_ticker_text(config)
    directory = TickerDirectory.from_text(text)
    if directory.issues:
        _logger.info("Loaded %d tickers with %d malformed records", len(directory), len(directory.issues))
    else:
        _logger.debug("Loaded %d tickers", len(directory))
    return directory


def lookup_cik(directory: Mapping, ticker: str) -> int:
    """CIK for ``ticker`` (any case), or 0. Accepts any ticker -> CIK mapping."""
    if isinstance(directory, TickerDirectory):
        return directory.cik(ticker)
    if not ticker:
        return NOT_FOUND_CIK
    return directory.get(ticker.lower(), NOT_FOUND_CIK)


def lookup_ticker(directory: Mapping, cik: int) -> str:
    """Ticker carrying ``cik``, or "none". Plain mappings are scanned linearly."""
    if isinstance(directory, TickerDirectory):
        return directory.ticker(cik)
    for ticker, value in directory.items():
        if value == cik:
            return ticker
    return NOT_FOUND_TICKER
