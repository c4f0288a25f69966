# jobtech_mcp/server.py
# SPDX-License-Identifier: Apache-2.0
"""
FastMCP server for the JobTech (Arbetsförmedlingen) open APIs.

- Registers all tools in one place.
- Exposes GET /health when served over HTTP.
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from . import __version__
from .constants import SERVER_NAME
from .tools import TOOL_NAMES, register_all_tools

logger = logging.getLogger(__name__)


def create_mcp_server() -> FastMCP:
    """Create and configure the MCP server with all JobTech tools."""
    mcp = FastMCP(SERVER_NAME, version=__version__)

    register_all_tools(mcp)

    @mcp.custom_route("/health", methods=["GET"])
    async def health(_request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "server": SERVER_NAME,
                "version": __version__,
                "tools": TOOL_NAMES,
            }
        )

    return mcp
