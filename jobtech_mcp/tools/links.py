# jobtech_mcp/tools/links.py
# SPDX-License-Identifier: Apache-2.0
"""JobAd Links tool: listings from the whole Swedish market, incl. private job sites."""

import logging
from typing import Annotated, Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..constants import DEFAULT_LIMIT, MAX_LIMIT
from ..error_handler import handle_tool_errors
from ..formatters import date_only
from ..http import build_links_url, fetch_json_async
from .annotations import read_only
from .common import hits_of, range_header, search_params, text_result, total_of

logger = logging.getLogger(__name__)


def _format_link(ad: Dict[str, Any]) -> str:
    address = ad.get("workplace_address") or {}
    place = address.get("city") or address.get("municipality")
    parts = [
        f"**{ad.get('headline') or 'No title'}**",
        f"Employer: {ad['employer']['name']}" if (ad.get("employer") or {}).get("name") else None,
        f"Occupation: {ad['occupation']['label']}" if (ad.get("occupation") or {}).get("label") else None,
        f"Location: {place}" if place else None,
        f"Apply by: {date_only(ad['application_deadline'])}" if ad.get("application_deadline") else None,
        f"Source: {ad['source']}" if ad.get("source") else None,
        f"Link: {ad['url']}" if ad.get("url") else None,
    ]
    return " | ".join(p for p in parts if p)


@handle_tool_errors("af_search_job_links")
async def search_job_links(
    q: Annotated[Optional[str], Field(description="Free-text search")] = None,
    occupation_name: Annotated[Optional[str], Field(description="Occupation name")] = None,
    occupation_group: Annotated[Optional[str], Field(description="Occupation group ID")] = None,
    occupation_field: Annotated[Optional[str], Field(description="Occupation field ID")] = None,
    municipality: Annotated[Optional[str], Field(description="Municipality code")] = None,
    region: Annotated[Optional[str], Field(description="Region/county code")] = None,
    country: Annotated[Optional[str], Field(description="Country code (default: Sweden)")] = None,
    limit: Annotated[int, Field(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Field(ge=0)] = 0,
) -> ToolResult:
    """
    Search job listings from the entire Swedish labour market via the JobAd Links API.
    Includes listings from private job sites in addition to the Public Employment Service.

    Returns:
        Job listings with source and link to the original posting.
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
        country=country,
    )
    url = build_links_url("/joblinks", params)
    logger.info("JobAd Links: %s", url)

    data = await fetch_json_async(url)
    hits = hits_of(data)
    total = total_of(data, default=len(hits))

    if not hits:
        return text_result("No listings found.")

    body = "\n\n".join(_format_link(ad) for ad in hits)
    return text_result(
        range_header(total, offset, len(hits), "listings") + body,
        {"total": total, "count": len(hits), "hits": hits},
    )


def register_links_tools(mcp: FastMCP) -> None:
    mcp.tool(
        search_job_links,
        name="af_search_job_links",
        annotations=read_only("Search jobs from the full market (JobAd Links)"),
        output_schema=None,
    )
