# jobtech_mcp/error_handler.py
# SPDX-License-Identifier: Apache-2.0
"""
Centralized error handling for the JobTech MCP tools.

- One user-facing message per failure kind of the fetch policy.
- Tool functions are wrapped so that any failure becomes an MCP error result
  (``ToolError``) instead of tearing down the session.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

import requests
from fastmcp.exceptions import ToolError

from .exceptions import (
    ApiError,
    ClientError,
    RateLimitedError,
    ServerError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def is_not_found(exception: BaseException) -> bool:
    """True for upstream 404s, which many tools report as an empty result."""
    return isinstance(exception, ClientError) and exception.status_code == 404


# ---------------------------------------------------------------------------
# Exception → user-facing message
# ---------------------------------------------------------------------------
def convert_exception_to_message(exception: Exception, context: str = "") -> str:
    """
    Convert an exception raised below a tool into a short message for the end user.
    """
    where = context or "operation"

    if isinstance(exception, RateLimitedError):
        return f"{where}: the JobTech API rate-limited the request. Wait a moment and try again."

    if isinstance(exception, UpstreamTimeoutError):
        return f"{where}: {exception.message}. The upstream API did not answer in time."

    if isinstance(exception, ServerError):
        return (
            f"{where}: upstream server error {exception.status_code} for {exception.url}. "
            "The service may be temporarily unavailable."
        )

    if isinstance(exception, ClientError):
        return f"{where}: request rejected with status {exception.status_code} ({exception.url})."

    if isinstance(exception, ApiError):
        return f"{where}: {exception.message}"

    if isinstance(exception, requests.ConnectionError):
        return f"{where}: could not connect to the JobTech API ({exception})."

    # --- Unknown/unexpected errors ---
    logger.error(
        "Unhandled error in %s: %s",
        where,
        exception,
        extra={"error_type": type(exception).__name__},
        exc_info=exception,
    )
    return f"Failed to execute {where}: {exception}"


def handle_tool_errors(context: str) -> Callable[[F], F]:
    """
    Decorate an async tool so failures surface as ``ToolError`` with a clean message.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await fn(*args, **kwargs)
            except ToolError:
                raise
            except Exception as e:
                if isinstance(e, ApiError):
                    logger.warning("%s failed: %s", context, e, extra={"url": e.url, "status_code": e.status_code})
                raise ToolError(convert_exception_to_message(e, context)) from e

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["convert_exception_to_message", "handle_tool_errors", "is_not_found"]
