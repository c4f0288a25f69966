# jobtech_mcp/tools/historical.py
# SPDX-License-Identifier: Apache-2.0
"""Historical Job Ads tool: archived listings from 2006 onwards (GET /search)."""

import logging
from typing import Annotated, Literal, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..constants import DEFAULT_LIMIT, MAX_LIMIT
from ..error_handler import handle_tool_errors
from ..formatters import format_hits
from ..http import build_historical_url, fetch_json_async
from .annotations import read_only
from .common import hits_of, range_header, search_params, text_result, total_of

logger = logging.getLogger(__name__)


@handle_tool_errors("af_search_historical_jobs")
async def search_historical_jobs(
    q: Annotated[Optional[str], Field(description="Free-text search")] = None,
    occupation_name: Annotated[Optional[str], Field(description="Occupation name")] = None,
    occupation_group: Annotated[Optional[str], Field(description="Occupation group ID")] = None,
    occupation_field: Annotated[Optional[str], Field(description="Occupation field ID")] = None,
    municipality: Annotated[Optional[str], Field(description="Municipality code")] = None,
    region: Annotated[Optional[str], Field(description="Region/county code")] = None,
    employer: Annotated[Optional[str], Field(description="Organization number")] = None,
    published_after: Annotated[Optional[str], Field(description="ISO 8601 date, e.g. '2023-01-01'")] = None,
    published_before: Annotated[Optional[str], Field(description="ISO 8601 date, e.g. '2023-12-31'")] = None,
    limit: Annotated[int, Field(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Field(ge=0)] = 0,
    detail: Annotated[Literal["summary", "full"], Field(description="Detail level")] = "summary",
) -> ToolResult:
    """
    Search among archived (historical) job listings from 2006 onwards via the Historical Job Ads API.

    Same search parameters as af_search_jobs but targeting archived/closed listings,
    plus a publication date window. Useful for labour market and trend analysis.

    Returns:
        Historical job listings with metadata.
    """
    params = search_params(
        limit,
        offset,
        q=q,
        occupation_name=occupation_name,
        occupation_group=occupation_group,
        occupation_field=occupation_field,
        municipality=municipality,
        region=region,
        employer=employer,
        published_after=published_after,
        published_before=published_before,
    )
    url = build_historical_url("/search", params)
    logger.info("Historical search: %s", url)

    data = await fetch_json_async(url)
    total = total_of(data)
    hits = hits_of(data)

    if not hits:
        return text_result("No historical listings found.")

    return text_result(
        range_header(total, offset, len(hits), "historical listings") + format_hits(hits, detail),
        {"total": total, "offset": offset, "count": len(hits), "hits": hits},
    )


def register_historical_tools(mcp: FastMCP) -> None:
    mcp.tool(
        search_historical_jobs,
        name="af_search_historical_jobs",
        annotations=read_only("Search historical job listings"),
        output_schema=None,
    )
