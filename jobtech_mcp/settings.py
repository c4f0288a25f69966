# jobtech_mcp/settings.py
# SPDX-License-Identifier: Apache-2.0
"""
Runtime settings, read once from the environment (and a local .env if present).

Transport selection and logging live here together with the knobs of the
shared HTTP fetch policy. Settings never change how responses are classified.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv
load_dotenv()  # load .env early

TRUTHY = {"1", "true", "yes", "on", "y", "t"}


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return v.strip() if v and v.strip() else default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, "").strip() or default)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int((os.getenv(name, "") or str(default)).strip())
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in TRUTHY


@dataclass
class HTTPConfig:
    """Knobs for the shared fetch policy."""
    timeout_s: float = field(default_factory=lambda: _env_float("JOBTECH_TIMEOUT_S", 10.0))
    retries: int = field(default_factory=lambda: _env_int("JOBTECH_RETRIES", 3))
    backoff_base_s: float = field(default_factory=lambda: _env_float("JOBTECH_BACKOFF_BASE_S", 1.0))


@dataclass
class ServerConfig:
    """MCP server configuration (stdio or streamable HTTP)."""
    transport: str = field(default_factory=lambda: _env("TRANSPORT", "stdio").lower())
    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))
    path: str = field(default_factory=lambda: _env("MCP_PATH", "/mcp"))

    def __post_init__(self) -> None:
        self._validate_transport()
        self._validate_port_range()
        self._validate_path_format()

    def _validate_transport(self) -> None:
        if self.transport not in ("stdio", "http"):
            raise ConfigurationError(
                f"Unknown transport '{self.transport}'. Use 'stdio' or 'http'."
            )

    def _validate_port_range(self) -> None:
        if not (1 <= self.port <= 65535):
            raise ConfigurationError(f"Port {self.port} is not in valid range (1-65535)")

    def _validate_path_format(self) -> None:
        if not self.path.startswith("/") or len(self.path) < 2:
            raise ConfigurationError(
                f"HTTP path '{self.path}' must start with '/' and be at least 2 characters"
            )


@dataclass
class _Settings:
    # logging
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())
    log_json: bool = field(default_factory=lambda: _env_bool("LOG_JSON", False))
    # upstream HTTP
    http: HTTPConfig = field(default_factory=HTTPConfig)
    # inbound transport
    server: ServerConfig = field(default_factory=ServerConfig)


SETTINGS = _Settings()
