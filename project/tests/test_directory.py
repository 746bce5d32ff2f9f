# tests/test_directory.py
# -----------------------------------------------------------------------
# Unit tests for sec_ticker/directory.py
#
# Directories are built from inline feed text; fetch_directory() is
# exercised with requests.get monkeypatched so no test hits sec.gov.
# -----------------------------------------------------------------------

import pandas as pd
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sec_ticker.config import FetchConfig
from sec_ticker.directory import (
    NOT_FOUND_CIK,
    NOT_FOUND_TICKER,
    TickerDirectory,
    fetch_directory,
    lookup_cik,
    lookup_ticker,
    padded_cik,
)
from sec_ticker.ticker_fetch import TickerTransportError


SAMPLE_FEED = (
    "aapl\t320193\n"
    "msft\t789019\n"
    "vz\t732712\n"
    "googl\t1652044\n"
    "goog\t1652044\n"
    "brk-b\t1067983\n"
)


class _FakeResponse:
    def __init__(self, body: bytes, status_code: int = 200):
        self.content = body
        self.status_code = status_code
        self.reason = "OK" if status_code == 200 else "Error"
        self.headers = {}


@pytest.fixture
def directory():
    return TickerDirectory.from_text(SAMPLE_FEED)


# ═══════════════════════════════════════════════════════════════════════
# Construction & mapping protocol
# ═══════════════════════════════════════════════════════════════════════

class TestTickerDirectory:
    def test_two_line_feed(self):
        d = TickerDirectory.from_text("aapl\t320193\nvz\t732712")
        assert len(d) == 2
        assert lookup_cik(d, "aapl") == 320193
        assert lookup_ticker(d, 732712) == "vz"

    def test_mapping_protocol(self, directory):
        assert directory["vz"] == 732712
        assert "aapl" in directory
        assert "AAPL" not in directory
        assert set(directory) == {"aapl", "msft", "vz", "googl", "goog", "brk-b"}
        with pytest.raises(KeyError):
            directory["nope"]

    def test_is_read_only(self, directory):
        with pytest.raises(TypeError):
            directory["new"] = 1

    def test_source_mapping_copied(self):
        src = {"aapl": 320193}
        d = TickerDirectory(src)
        src["aapl"] = 1
        assert d.cik("aapl") == 320193

    def test_equal_to_plain_dict(self):
        d = TickerDirectory.from_text("aapl\t320193\nvz\t732712")
        assert d == {"vz": 732712, "aapl": 320193}

    def test_issues_exposed(self):
        d = TickerDirectory.from_text("aapl\tbad\nvz\t732712\nlonely")
        assert len(d.issues) == 2
        assert d.cik("aapl") == 0
        assert "2 issues" in repr(d)


# ═══════════════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════════════

class TestLookupCik:
    @pytest.mark.parametrize("query", ["VZ", "vz", "Vz", "vZ"])
    def test_case_insensitive(self, directory, query):
        assert lookup_cik(directory, query) == 732712

    def test_unknown_ticker_returns_zero(self, directory):
        assert lookup_cik(directory, "not-a-real-ticker") == NOT_FOUND_CIK == 0

    def test_empty_ticker_returns_zero(self, directory):
        assert lookup_cik(directory, "") == 0

    def test_plain_dict_supported(self):
        assert lookup_cik({"vz": 732712}, "VZ") == 732712
        assert lookup_cik({"vz": 732712}, "t") == 0


class TestLookupTicker:
    def test_known_cik(self, directory):
        assert lookup_ticker(directory, 320193) == "aapl"

    def test_zero_returns_none_sentinel(self, directory):
        assert lookup_ticker(directory, 0) == NOT_FOUND_TICKER == "none"

    def test_zero_found_when_feed_has_bad_cik(self):
        d = TickerDirectory.from_text("junk\tn/a\nvz\t732712")
        assert lookup_ticker(d, 0) == "junk"

    def test_shared_cik_returns_first_in_feed_order(self, directory):
        assert lookup_ticker(directory, 1652044) == "googl"

    def test_round_trip_for_unique_ciks(self, directory):
        for ticker, cik in directory.items():
            if cik == 1652044:
                continue
            found = lookup_ticker(directory, cik)
            assert lookup_cik(directory, found) == cik

    def test_overwritten_ticker_leaves_no_stale_reverse_entry(self):
        d = TickerDirectory.from_text("abc\t111\nabc\t222")
        assert lookup_ticker(d, 111) == "none"
        assert lookup_ticker(d, 222) == "abc"

    def test_plain_dict_linear_scan(self):
        assert lookup_ticker({"aapl": 320193, "vz": 732712}, 732712) == "vz"
        assert lookup_ticker({"aapl": 320193}, 5) == "none"


# ═══════════════════════════════════════════════════════════════════════
# Tabular export
# ═══════════════════════════════════════════════════════════════════════

class TestToFrame:
    def test_columns_and_padding(self, directory):
        df = directory.to_frame()
        assert list(df.columns) == ["ticker", "cik", "cik_str"]
        assert len(df) == len(directory)
        row = df[df["ticker"] == "aapl"].iloc[0]
        assert row["cik"] == 320193
        assert row["cik_str"] == "0000320193"

    def test_empty_directory(self):
        df = TickerDirectory({}).to_frame()
        assert df.empty
        assert list(df.columns) == ["ticker", "cik", "cik_str"]

    def test_padded_cik(self):
        assert padded_cik(732712) == "0000732712"
        assert padded_cik(0) == "0000000000"


# ═══════════════════════════════════════════════════════════════════════
# fetch_directory
# ═══════════════════════════════════════════════════════════════════════

class TestFetchDirectory:
    def test_builds_directory_from_response(self, monkeypatch):
        calls = []

        def fake_get(url, headers=None, timeout=None):
            calls.append(url)
            return _FakeResponse(SAMPLE_FEED.encode())

        monkeypatch.setattr("sec_ticker.ticker_fetch.requests.get", fake_get)
        d = fetch_directory(FetchConfig(url="http://fixture/ticker.txt"))
        assert calls == ["http://fixture/ticker.txt"]
        assert d.cik("AAPL") == 320193

    def test_two_fetches_are_equal(self, monkeypatch):
        monkeypatch.setattr(
            "sec_ticker.ticker_fetch.requests.get",
            lambda url, headers=None, timeout=None: _FakeResponse(SAMPLE_FEED.encode()),
        )
        first = fetch_directory()
        second = fetch_directory()
        assert first is not second
        assert dict(first) == dict(second)

    def test_transport_error_propagates(self, monkeypatch):
        monkeypatch.setattr(
            "sec_ticker.ticker_fetch.requests.get",
            lambda url, headers=None, timeout=None: _FakeResponse(b"", status_code=500),
        )
        with pytest.raises(TickerTransportError) as excinfo:
            fetch_directory()
        assert excinfo.value.status_code == 500
