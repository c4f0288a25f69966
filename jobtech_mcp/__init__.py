# SPDX-License-Identifier: Apache-2.0
"""
JobTech MCP server.

Exposes the Swedish Public Employment Service's open JobTech APIs (JobSearch,
JobStream, Historical Job Ads, JobAd Enrichments, JobAd Links, JobEd Connect
and the Taxonomy) as Model Context Protocol tools.

Convenience:
- `create_mcp_server()` builds a FastMCP instance with all tools registered.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("jobtech-mcp")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "2.0.0"

from .server import create_mcp_server  # noqa: E402

__all__ = ["__version__", "create_mcp_server"]
