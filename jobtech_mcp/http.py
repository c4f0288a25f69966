# jobtech_mcp/http.py
# SPDX-License-Identifier: Apache-2.0
"""
Shared JSON HTTP access for all seven JobTech upstreams.

One fetch policy wraps every outbound call:

- one wall-clock timeout per attempt (connect, headers and body); a
  timeout fails the call and is not retried
- 429 fails immediately with ``RateLimitedError``
- 5xx is retried (at most 3 retries) with a backoff between attempts;
  GET backs off linearly (1s, 2s, 3s), POST exponentially (1s, 2s, 4s)
- any other non-2xx fails with ``ClientError``
- connection-level failures propagate unchanged

Tool handlers are async; they await the synchronous client through
``asyncio.to_thread`` so the event loop only yields at network waits.
"""
from __future__ import annotations

import asyncio
import json
import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

import requests
from urllib3.exceptions import ReadTimeoutError

from .constants import (
    ENRICHMENT_BASE_URL,
    HISTORICAL_BASE_URL,
    JOBED_BASE_URL,
    JOBSEARCH_BASE_URL,
    JOBSTREAM_BASE_URL,
    LINKS_BASE_URL,
    SERVER_NAME,
    TAXONOMY_BASE_URL,
)
from .exceptions import ApiError, ClientError, RateLimitedError, ServerError, UpstreamTimeoutError
from .settings import SETTINGS

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
# granularity of the wall-clock check while reading a body
READ_CHUNK_BYTES = 512

Scalar = Union[str, int, float, bool]
ParamValue = Union[Scalar, Sequence[Scalar], None]
Params = Mapping[str, ParamValue]


# ---------------------------
# URL construction
# ---------------------------
def _param_str(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base: str, path: str, params: Optional[Params] = None) -> str:
    """
    Join ``base + path`` and append ``params`` as a query string.

    ``None`` values are dropped. Lists and tuples become repeated
    same-named parameters (``tags=a&tags=b``), never comma-joined.
    """
    pairs = []
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _param_str(v)) for v in value)
        else:
            pairs.append((key, _param_str(value)))

    url = f"{base}{path}"
    if pairs:
        url = f"{url}?{urlencode(pairs)}"
    return url


def build_jobsearch_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(JOBSEARCH_BASE_URL, path, params)


def build_jobstream_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(JOBSTREAM_BASE_URL, path, params)


def build_historical_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(HISTORICAL_BASE_URL, path, params)


def build_enrichment_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(ENRICHMENT_BASE_URL, path, params)


def build_links_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(LINKS_BASE_URL, path, params)


def build_jobed_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(JOBED_BASE_URL, path, params)


def build_taxonomy_url(path: str, params: Optional[Params] = None) -> str:
    return build_url(TAXONOMY_BASE_URL, path, params)


# ---------------------------
# Fetch policy
# ---------------------------
def backoff_delay(strategy: str, attempt: int, base_s: float = 1.0) -> float:
    """Seconds to wait before retry number ``attempt`` (1-based)."""
    if strategy == "linear":
        return attempt * base_s
    if strategy == "exponential":
        return (2 ** (attempt - 1)) * base_s
    raise ValueError(f"Unknown backoff strategy: {strategy!r}")


def _is_read_timeout(exc: requests.ConnectionError) -> bool:
    # requests re-raises a body read timeout as ConnectionError(ReadTimeoutError)
    cause = exc.args[0] if exc.args else None
    return isinstance(cause, ReadTimeoutError) or isinstance(exc.__context__, ReadTimeoutError)


class JsonHttpClient:
    """
    Resilient JSON client used by every tool.

    Each attempt gets one wall-clock budget (``timeout_s``) covering connect,
    headers and body. Session, logger and sleep are injectable so the policy
    can be tested without network access or real waiting. Without an injected
    session every worker thread gets its own ``requests.Session``.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout_s: Optional[float] = None,
        retries: Optional[int] = None,
        backoff_base_s: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session = session
        self._local = threading.local()
        self.timeout_s = SETTINGS.http.timeout_s if timeout_s is None else timeout_s
        self.retries = SETTINGS.http.retries if retries is None else retries
        self.backoff_base_s = SETTINGS.http.backoff_base_s if backoff_base_s is None else backoff_base_s
        self.logger = logger or logging.getLogger(__name__)
        self.sleep = sleep

    @staticmethod
    def _new_session() -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": SERVER_NAME, "Accept": "application/json"})
        return s

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        s = getattr(self._local, "session", None)
        if s is None:
            s = self._local.session = self._new_session()
        return s

    def fetch_json(self, url: str, retries: Optional[int] = None) -> Any:
        """GET ``url`` and return the parsed JSON body."""
        return self._request("GET", url, retries=retries, backoff="linear")

    def post_json(self, url: str, body: Any, retries: Optional[int] = None) -> Any:
        """POST ``body`` as JSON to ``url`` and return the parsed JSON body."""
        return self._request("POST", url, body=body, retries=retries, backoff="exponential")

    def _read_body(self, response: requests.Response, url: str, deadline: float) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_BYTES):
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise UpstreamTimeoutError(url, self.timeout_s)
        return b"".join(chunks)

    def _send(self, method: str, url: str, body: Any) -> Tuple[int, str, Optional[bytes]]:
        """
        One attempt. Returns ``(status, reason, raw_body)``; the body is only
        read for 2xx responses.
        """
        headers = {"Accept": "application/json"}
        kwargs: dict = {"headers": headers, "timeout": self.timeout_s, "stream": True}
        if method == "POST":
            headers["Content-Type"] = "application/json"
            kwargs["json"] = body

        deadline = time.monotonic() + self.timeout_s
        response = None
        try:
            response = self.session.request(method, url, **kwargs)
            status = response.status_code
            if not 200 <= status < 300:
                return status, response.reason, None
            if time.monotonic() > deadline:
                raise UpstreamTimeoutError(url, self.timeout_s)
            return status, response.reason, self._read_body(response, url, deadline)
        except requests.Timeout as e:
            raise UpstreamTimeoutError(url, self.timeout_s) from e
        except requests.ConnectionError as e:
            if _is_read_timeout(e):
                raise UpstreamTimeoutError(url, self.timeout_s) from e
            raise
        finally:
            if response is not None:
                response.close()

    def _request(self, method: str, url: str, *, body: Any = None, retries: Optional[int], backoff: str) -> Any:
        budget = self.retries if retries is None else retries
        budget = max(0, min(budget, MAX_RETRIES))
        attempt = 0

        while True:
            attempt += 1
            status, reason, raw = self._send(method, url, body)

            if status == 429:
                raise RateLimitedError(url)

            if status >= 500:
                if attempt <= budget:
                    delay = backoff_delay(backoff, attempt, self.backoff_base_s)
                    self.logger.warning(
                        "Retry %d/%d for %s after %dms (status %d)",
                        attempt, budget, url, int(delay * 1000), status,
                        extra={"url": url, "attempt": attempt, "delay_ms": int(delay * 1000), "status_code": status},
                    )
                    self.sleep(delay)
                    continue
                raise ServerError(
                    f"{method} API request failed: {status} {reason} (after {attempt} attempts)",
                    status,
                    url,
                )

            if not 200 <= status < 300:
                raise ClientError(f"{method} API request failed: {status} {reason}", status, url)

            try:
                return json.loads(raw)
            except ValueError as e:
                raise ApiError(f"Invalid JSON in response from {url}", status, url) from e


_client: Optional[JsonHttpClient] = None


def get_client() -> JsonHttpClient:
    global _client
    if _client is None:
        _client = JsonHttpClient()
    return _client


def fetch_json(url: str, retries: Optional[int] = None) -> Any:
    return get_client().fetch_json(url, retries)


def post_json(url: str, body: Any, retries: Optional[int] = None) -> Any:
    return get_client().post_json(url, body, retries)


# ---------------------------
# Async-friendly adapters
# ---------------------------
async def fetch_json_async(url: str, retries: Optional[int] = None) -> Any:
    return await asyncio.to_thread(fetch_json, url, retries)


async def post_json_async(url: str, body: Any, retries: Optional[int] = None) -> Any:
    return await asyncio.to_thread(post_json, url, body, retries)
