import json
import logging

import pytest

from jobtech_mcp.cli_main import resolve_server_config
from jobtech_mcp.logging_config import configure_logging
from jobtech_mcp.settings import ConfigurationError, ServerConfig, _Settings


def test_defaults_from_env(monkeypatch):
    for name in ("TRANSPORT", "PORT", "HOST", "MCP_PATH", "JOBTECH_TIMEOUT_S", "JOBTECH_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    s = _Settings()
    assert s.server.transport == "stdio"
    assert s.server.port == 3000
    assert s.http.timeout_s == 10.0
    assert s.http.retries == 3


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TRANSPORT", "HTTP")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("JOBTECH_TIMEOUT_S", "2.5")
    s = _Settings()
    assert s.server.transport == "http"
    assert s.server.port == 8080
    assert s.http.timeout_s == 2.5


@pytest.mark.parametrize("kwargs", [{"transport": "sse"}, {"port": 0}, {"port": 70000}, {"path": "mcp"}])
def test_server_config_validation(kwargs):
    with pytest.raises(ConfigurationError):
        ServerConfig(**{"transport": "stdio", "port": 3000, "path": "/mcp", **kwargs})


def test_cli_overrides_env():
    cfg = resolve_server_config(transport="http", port=9000)
    assert cfg.transport == "http"
    assert cfg.port == 9000


def test_json_logs_go_to_stderr(capsys):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("INFO", json_format=True)
        logging.getLogger("jobtech_mcp.test").info("hello %s", "world")
        err = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(err)
        assert record["message"] == "hello world"
        assert record["level"] == "INFO"
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
