import logging
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests
from urllib3.exceptions import ReadTimeoutError

from conftest import FakeResponse, FakeSession
from jobtech_mcp import http as jobtech_http
from jobtech_mcp.exceptions import ApiError, ClientError, RateLimitedError, ServerError, UpstreamTimeoutError
from jobtech_mcp.http import JsonHttpClient, backoff_delay, build_url


def make_client(*outcomes, **kwargs):
    session = FakeSession(*outcomes)
    sleeps = []
    client = JsonHttpClient(
        session, timeout_s=10, retries=3, backoff_base_s=1.0, sleep=sleeps.append, **kwargs
    )
    return client, session, sleeps


URL = "https://jobsearch.api.jobtechdev.se/search?q=nurse"


# ---------------------------
# build_url
# ---------------------------
def test_build_url_repeats_sequences_and_skips_none():
    url = build_url(
        "https://example.com", "/search",
        {"q": "nurse", "limit": 10, "tags": ["a", "b"], "missing": None},
    )
    assert url == "https://example.com/search?q=nurse&limit=10&tags=a&tags=b"
    assert "missing" not in url


def test_build_url_without_params_has_no_query():
    assert build_url("https://example.com", "/ad/123", {}) == "https://example.com/ad/123"
    assert build_url("https://example.com", "/ad/123") == "https://example.com/ad/123"


def test_build_url_encodes_values_and_booleans():
    url = build_url("https://example.com", "/search", {"q": "agil coach", "experience": False, "ids": ("x/y",)})
    assert "q=agil+coach" in url
    assert "experience=false" in url
    assert "ids=x%2Fy" in url


def test_backoff_delays():
    assert [backoff_delay("linear", n) for n in (1, 2, 3)] == [1, 2, 3]
    assert [backoff_delay("exponential", n) for n in (1, 2, 3)] == [1, 2, 4]
    with pytest.raises(ValueError):
        backoff_delay("fibonacci", 1)


# ---------------------------
# fetch_json
# ---------------------------
def test_get_returns_parsed_object_with_json_accept_header():
    response = FakeResponse(200, {"hits": []})
    client, session, sleeps = make_client(response)
    assert client.fetch_json(URL) == {"hits": []}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["headers"]["Accept"] == "application/json"
    assert call["timeout"] == 10
    assert call["stream"] is True
    assert response.closed
    assert sleeps == []


def test_get_returns_arrays_too():
    client, _, _ = make_client(FakeResponse(200, [{"taxonomy/id": "abc"}]))
    assert client.fetch_json(URL) == [{"taxonomy/id": "abc"}]


def test_rate_limit_fails_immediately():
    client, session, sleeps = make_client(FakeResponse(429), FakeResponse(200, {}))
    with pytest.raises(RateLimitedError) as exc:
        client.fetch_json(URL)
    assert exc.value.status_code == 429
    assert exc.value.url == URL
    assert len(session.calls) == 1
    assert sleeps == []


def test_server_errors_retry_linearly_then_fail():
    client, session, sleeps = make_client(*[FakeResponse(500, reason="Internal Server Error")] * 4)
    with pytest.raises(ServerError) as exc:
        client.fetch_json(URL)
    assert exc.value.status_code == 500
    assert exc.value.url == URL
    assert len(session.calls) == 4
    assert sleeps == [1.0, 2.0, 3.0]


def test_recovers_after_two_server_errors():
    client, session, sleeps = make_client(FakeResponse(500), FakeResponse(502), FakeResponse(200, {"ok": True}))
    assert client.fetch_json(URL) == {"ok": True}
    assert len(session.calls) == 3
    assert sum(sleeps) >= 3.0


@pytest.mark.parametrize("retries,attempts", [(0, 1), (1, 2), (3, 4), (10, 4)])
def test_attempts_are_bounded(retries, attempts):
    client, session, _ = make_client(*[FakeResponse(503)] * 5)
    with pytest.raises(ServerError):
        client.fetch_json(URL, retries=retries)
    assert len(session.calls) == attempts


def test_client_error_is_not_retried():
    client, session, _ = make_client(FakeResponse(404, reason="Not Found"))
    with pytest.raises(ClientError) as exc:
        client.fetch_json(URL)
    assert exc.value.status_code == 404
    assert exc.value.url == URL
    assert len(session.calls) == 1


def test_timeout_is_terminal():
    client, session, sleeps = make_client(requests.ReadTimeout("slow"), FakeResponse(200, {}))
    with pytest.raises(UpstreamTimeoutError) as exc:
        client.fetch_json(URL)
    assert exc.value.url == URL
    assert exc.value.status_code is None
    assert "10s" in str(exc.value)
    assert len(session.calls) == 1
    assert sleeps == []


def test_connection_errors_pass_through_unchanged():
    boom = requests.ConnectionError("Name or service not known")
    client, session, _ = make_client(boom)
    with pytest.raises(requests.ConnectionError) as exc:
        client.fetch_json(URL)
    assert exc.value is boom
    assert len(session.calls) == 1


def test_invalid_json_is_an_api_error():
    client, _, _ = make_client(FakeResponse(200, bad_json=True))
    with pytest.raises(ApiError) as exc:
        client.fetch_json(URL)
    assert exc.value.status_code == 200


def test_repeated_calls_are_structurally_identical():
    payload = {"total": {"value": 1}, "hits": [{"id": "1"}]}
    client, _, _ = make_client(FakeResponse(200, payload), FakeResponse(200, payload))
    assert client.fetch_json(URL) == client.fetch_json(URL)


def test_retries_are_logged_on_injected_logger(caplog):
    log = logging.getLogger("tests.fetch_policy")
    client, _, _ = make_client(FakeResponse(500), FakeResponse(200, {}), logger=log)
    with caplog.at_level(logging.WARNING, logger="tests.fetch_policy"):
        client.fetch_json(URL)
    assert any("Retry 1/3" in r.getMessage() and r.name == "tests.fetch_policy" for r in caplog.records)


# ---------------------------
# post_json
# ---------------------------
def test_post_sends_json_body():
    client, session, _ = make_client(FakeResponse(200, [{"doc_id": "1"}]))
    body = {"documents_input": [{"doc_id": "1", "doc_text": "Vi söker en sjuksköterska"}]}
    assert client.post_json("https://example.com/enrich", body) == [{"doc_id": "1"}]
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == body
    assert call["headers"]["Content-Type"] == "application/json"


def test_post_retries_exponentially():
    client, session, sleeps = make_client(*[FakeResponse(503)] * 4)
    with pytest.raises(ServerError):
        client.post_json("https://example.com/match", {})
    assert len(session.calls) == 4
    assert sleeps == [1.0, 2.0, 4.0]


def test_post_rate_limit_not_retried():
    client, session, _ = make_client(FakeResponse(429))
    with pytest.raises(RateLimitedError):
        client.post_json("https://example.com/match", {})
    assert len(session.calls) == 1


def test_body_read_timeout_is_a_timeout():
    # requests wraps a read timeout during the body as ConnectionError
    stalled = requests.ConnectionError(ReadTimeoutError(None, URL, "Read timed out."))
    client, session, sleeps = make_client(stalled, FakeResponse(200, {}))
    with pytest.raises(UpstreamTimeoutError) as exc:
        client.fetch_json(URL)
    assert exc.value.status_code is None
    assert len(session.calls) == 1
    assert sleeps == []


def test_error_responses_are_closed_unread():
    response = FakeResponse(500)
    client, _, _ = make_client(response, FakeResponse(200, {}))
    client.fetch_json(URL)
    assert response.closed


# ---------------------------
# wall-clock timeout against a real socket
# ---------------------------
BODY = b'{"ok": true}'


class _SlowBodyHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(BODY)))
        self.end_headers()
        try:
            if self.path == "/stall":
                self.wfile.write(BODY[:4])
                self.wfile.flush()
                time.sleep(3)
                self.wfile.write(BODY[4:])
            elif self.path == "/drip":
                for byte in BODY:
                    self.wfile.write(bytes([byte]))
                    self.wfile.flush()
                    time.sleep(0.2)
            else:
                self.wfile.write(BODY)
        except OSError:
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SlowBodyHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def local_client(timeout_s):
    session = requests.Session()
    session.trust_env = False
    return JsonHttpClient(session, timeout_s=timeout_s, retries=0)


def test_real_server_fast_body_is_parsed(slow_server):
    assert local_client(2).fetch_json(f"{slow_server}/fast") == {"ok": True}


def test_stalled_body_times_out(slow_server):
    started = time.monotonic()
    with pytest.raises(UpstreamTimeoutError) as exc:
        local_client(1).fetch_json(f"{slow_server}/stall")
    assert time.monotonic() - started < 2.5
    assert exc.value.status_code is None


def test_dripped_body_cannot_outlive_the_deadline(slow_server):
    # every byte arrives well within the socket timeout, the whole body does not
    with pytest.raises(UpstreamTimeoutError) as exc:
        local_client(0.5).fetch_json(f"{slow_server}/drip")
    assert "0.5s" in str(exc.value)


# ---------------------------
# sessions and async adapters
# ---------------------------
def test_each_thread_gets_its_own_session():
    client = JsonHttpClient(timeout_s=1)
    main = client.session
    assert client.session is main

    seen = []
    worker = threading.Thread(target=lambda: seen.append(client.session))
    worker.start()
    worker.join()
    assert seen[0] is not main


def test_injected_session_is_shared():
    session = FakeSession()
    client = JsonHttpClient(session, timeout_s=1)
    seen = []
    worker = threading.Thread(target=lambda: seen.append(client.session))
    worker.start()
    worker.join()
    assert seen == [session]


@pytest.mark.asyncio
async def test_async_fetch_passes_retry_budget(monkeypatch):
    client, session, _ = make_client(*[FakeResponse(503)] * 4)
    monkeypatch.setattr(jobtech_http, "_client", client)
    with pytest.raises(ServerError):
        await jobtech_http.fetch_json_async(URL, retries=0)
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_async_post_passes_retry_budget(monkeypatch):
    client, session, sleeps = make_client(*[FakeResponse(503)] * 4)
    monkeypatch.setattr(jobtech_http, "_client", client)
    with pytest.raises(ServerError):
        await jobtech_http.post_json_async("https://example.com/match", {}, retries=1)
    assert len(session.calls) == 2
    assert sleeps == [1.0]
