import json
from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "", bad_json: bool = False):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._bad_json = bad_json
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        raw = b"<html>not json</html>" if self._bad_json else json.dumps(self._payload).encode("utf-8")
        for i in range(0, len(raw), chunk_size):
            yield raw[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Replays scripted responses (or raises scripted exceptions) in order."""

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeUpstream:
    """Stands in for fetch_json_async / post_json_async inside the tool modules."""

    def __init__(self, handler: Callable[..., Any]):
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    async def get(self, url: str, retries: Optional[int] = None) -> Any:
        self.calls.append({"method": "GET", "url": url})
        return self._answer(url)

    async def post(self, url: str, body: Any, retries: Optional[int] = None) -> Any:
        self.calls.append({"method": "POST", "url": url, "body": body})
        return self._answer(url)

    def _answer(self, url: str) -> Any:
        result = self.handler(url)
        if isinstance(result, BaseException):
            raise result
        return result

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]


@pytest.fixture
def upstream(monkeypatch):
    """
    Patch the async fetch helpers of a tool module.

    Usage: fake = upstream(job_search, lambda url: {...})
    """

    def _install(module, handler):
        fake = FakeUpstream(handler if callable(handler) else (lambda _url: handler))
        if hasattr(module, "fetch_json_async"):
            monkeypatch.setattr(module, "fetch_json_async", fake.get)
        if hasattr(module, "post_json_async"):
            monkeypatch.setattr(module, "post_json_async", fake.post)
        return fake

    return _install


def text_of(result) -> str:
    return result.content[0].text
