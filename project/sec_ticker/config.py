# config.py
# ------------------------------------------------------------------
# Endpoint and HTTP settings for the SEC ticker feed.
#
# The feed URL, timeout and retry count used to be literals inside the
# fetch code. They now live in FetchConfig so callers (and tests) can
# point the fetch at a local fixture server or tighten the timeout
# without touching module globals.
#
# Environment overrides:
#   SEC_USER_AGENT          descriptive User-Agent, e.g.
#                           "Jane Smith jane@example.com"
#   SEC_TICKER_URL          alternate feed location
#   SEC_TICKER_TIMEOUT      request timeout in seconds
#   SEC_TICKER_MAX_RETRIES  extra attempts on 429/503/network errors
# ------------------------------------------------------------------

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple, Union

SEC_TICKER_URL = "https://www.sec.gov/include/ticker.txt"

# SEC requires a descriptive User-Agent. Format: "Name email"
_DEFAULT_USER_AGENT = "SecTickerDirectory contact@example.com"

# Backoff base in seconds; doubles each retry
_DEFAULT_RETRY_BACKOFF = 1.5

Timeout = Union[float, Tuple[float, float]]


@dataclass(frozen=True)
class FetchConfig:
    """Where and how to download the ticker feed.

    ``timeout=None`` leaves the transport default in place (no timeout),
    and ``max_retries=0`` issues exactly one request.
    """

    url: str = SEC_TICKER_URL
    timeout: Optional[Timeout] = None
    user_agent: str = _DEFAULT_USER_AGENT
    max_retries: int = 0
    retry_backoff: float = _DEFAULT_RETRY_BACKOFF
    encoding: str = "utf-8-sig"

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_backoff < 0:
            raise ValueError(f"retry_backoff must be >= 0, got {self.retry_backoff}")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "FetchConfig":
        """Build a config from ``SEC_*`` environment variables.

        Unset variables keep the defaults. Malformed numeric values raise
        ValueError rather than being silently ignored.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        user_agent = env.get("SEC_USER_AGENT")
        if user_agent:
            kwargs["user_agent"] = user_agent

        url = env.get("SEC_TICKER_URL")
        if url:
            kwargs["url"] = url

        timeout = env.get("SEC_TICKER_TIMEOUT")
        if timeout:
            try:
                kwargs["timeout"] = float(timeout)
            except ValueError:
                raise ValueError(f"SEC_TICKER_TIMEOUT is not a number: {timeout!r}") from None

        retries = env.get("SEC_TICKER_MAX_RETRIES")
        if retries:
            try:
                kwargs["max_retries"] = int(retries)
            except ValueError:
                raise ValueError(f"SEC_TICKER_MAX_RETRIES is not an integer: {retries!r}") from None

        return cls(**kwargs)

    def with_url(self, url: str) -> "FetchConfig":
        return replace(self, url=url)

    def headers(self) -> Dict[str, str]:
        # requests derives Host from the URL
        return {
            "User-Agent": self.user_agent,
            "Accept-Encoding": "gzip, deflate",
        }
