# jobtech_mcp/exceptions.py
# SPDX-License-Identifier: Apache-2.0
"""
Custom exceptions for the JobTech MCP server.

Every upstream failure surfaced by the fetch policy is an ``ApiError`` that
carries the HTTP status (when there is one) and the URL that was called, so
tool handlers can decide e.g. to turn a 404 into an empty result.

Transport failures below HTTP (DNS, refused connections) are not wrapped;
they reach callers as ``requests.ConnectionError``.
"""

from __future__ import annotations

from typing import Optional


class JobTechMCPError(Exception):
    """Base exception for the JobTech MCP server."""
    pass


class ApiError(JobTechMCPError):
    """An upstream call failed after the fetch policy gave up."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class RateLimitedError(ApiError):
    """Upstream answered 429. Never retried."""

    def __init__(self, url: str):
        super().__init__("Rate limit reached – please try again shortly", 429, url)


class UpstreamTimeoutError(ApiError):
    """A single attempt exceeded the timeout. Never retried."""

    def __init__(self, url: str, timeout_s: float):
        super().__init__(f"Timeout after {timeout_s:g}s for {url}", None, url)
        self.timeout_s = timeout_s


class ServerError(ApiError):
    """Upstream kept answering 5xx until the retry budget ran out."""
    pass


class ClientError(ApiError):
    """Upstream answered a non-2xx status other than 429 or 5xx."""
    pass


__all__ = [
    "JobTechMCPError",
    "ApiError",
    "RateLimitedError",
    "UpstreamTimeoutError",
    "ServerError",
    "ClientError",
]
