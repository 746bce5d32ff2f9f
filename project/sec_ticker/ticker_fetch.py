# ticker_fetch.py
# ------------------------------------------------------------------
# HTTP client for the SEC ticker.txt feed.
#
#   - One blocking GET per call. No timeout unless the config sets one.
#   - Optional exponential-backoff retry on transient failures (429, 503,
#     network errors). Off by default: max_retries=0 means one request.
#   - Structured exceptions (TickerFetchError and subclasses) so callers
#     can tell a transport failure from an undecodable body. Neither one
#     terminates the process; both propagate to the caller.
# ------------------------------------------------------------------

from __future__ import annotations

import logging
import math
import time
from typing import Optional

import requests

from sec_ticker.config import FetchConfig

_logger = logging.getLogger(__name__)

_RETRIABLE_STATUS = (429, 503)

# Upper bound on any single backoff sleep, in seconds
_MAX_RETRY_WAIT = 60.0


class TickerFetchError(Exception):
    """Raised when the ticker feed cannot be retrieved as text."""
    def __init__(self, url: str, status_code: int | None, message: str):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Ticker fetch failed [{status_code}] {url}: {message}")


class TickerTransportError(TickerFetchError):
    """Connection failure, timeout, or a non-200 HTTP status."""


class TickerDecodeError(TickerFetchError):
    """The response body could not be decoded as text."""


def _retry_wait(config: FetchConfig, attempt: int, resp: Optional[requests.Response] = None) -> float:
    wait = config.retry_backoff * (2 ** attempt)
    if resp is not None and resp.status_code == 429:
        # Respect Retry-After header if present
        retry_after = resp.headers.get("Retry-After")
        if retry_after:
            try:
                hinted = float(retry_after)
            except ValueError:
                hinted = None
            if hinted is not None and math.isfinite(hinted):
                wait = max(wait, hinted)
            else:
                _logger.debug("Ignoring unusable Retry-After %r", retry_after)
    return min(wait, _MAX_RETRY_WAIT)


def _decode(resp: requests.Response, config: FetchConfig) -> str:
    try:
        return resp.content.decode(config.encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise TickerDecodeError(config.url, resp.status_code, f"cannot decode body as {config.encoding}: {exc}") from exc


def fetch_ticker_text(config: Optional[FetchConfig] = None) -> str:
    """
    Download the raw ticker feed and return it as text.

    Args:
        config: Endpoint and HTTP settings. Defaults to FetchConfig().

    Returns:
        The full response body, decoded with ``config.encoding``.

    Raises:
        TickerTransportError: Network failure or non-200 status after all attempts.
        TickerDecodeError: The body is not valid text in the configured encoding.
    """
    config = config or FetchConfig()
    attempts = config.max_retries + 1
    last_exc: Optional[TickerFetchError] = None

    for attempt in range(attempts):
        _logger.debug("GET %s (attempt %d/%d)", config.url, attempt + 1, attempts)
        try:
            resp = requests.get(config.url, headers=config.headers(), timeout=config.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            last_exc = TickerTransportError(config.url, None, str(exc))
            last_exc.__cause__ = exc
            if attempt + 1 < attempts:
                wait = _retry_wait(config, attempt)
                _logger.warning("Ticker feed request failed (%s); retrying in %.1fs", exc, wait)
                time.sleep(wait)
            continue
        except requests.RequestException as exc:
            raise TickerTransportError(config.url, None, str(exc)) from exc

        if resp.status_code == 200:
            return _decode(resp, config)

        if resp.status_code in _RETRIABLE_STATUS:
            last_exc = TickerTransportError(config.url, resp.status_code, resp.reason or "")
            if attempt + 1 < attempts:
                wait = _retry_wait(config, attempt, resp)
                _logger.warning("Ticker feed returned %d; retrying in %.1fs", resp.status_code, wait)
                time.sleep(wait)
            continue

        # Other 4xx/5xx are not retriable
        raise TickerTransportError(config.url, resp.status_code, resp.reason or "")

    if attempts == 1:
        raise last_exc
    raise TickerTransportError(
        config.url, last_exc.status_code, f"Failed after {attempts} attempts: {last_exc}"
    ) from last_exc
