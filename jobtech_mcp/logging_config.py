# jobtech_mcp/logging_config.py
# SPDX-License-Identifier: Apache-2.0
"""
Logging configuration for the JobTech MCP server.

- Optional JSON or compact formats.
- Always writes to stderr; stdout carries the MCP stdio transport.
- Reduces noise from urllib3/httpx/uvicorn access logs.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

_PKG_PREFIX = "jobtech_mcp."


class MCPJSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Optional structured fields
        for key in ("url", "attempt", "delay_ms", "status_code", "error_type"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


class CompactFormatter(logging.Formatter):
    """Compact formatter (HH:MM:SS, shortened logger names)."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(_PKG_PREFIX):
            name = name[len(_PKG_PREFIX):]
        asctime = self.formatTime(record, datefmt="%H:%M:%S")
        line = f"{asctime} - {name} - {record.levelname} - {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure root logging with the selected formatter.

    Args:
        log_level: "DEBUG", "INFO", "WARNING", or "ERROR"
        json_format: True -> JSON logs; False -> compact human-readable
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    formatter: logging.Formatter = MCPJSONFormatter() if json_format else CompactFormatter()

    root = logging.getLogger()
    root.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates in notebooks/tests
    for h in root.handlers[:]:
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    # Quiet noisy libs
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
