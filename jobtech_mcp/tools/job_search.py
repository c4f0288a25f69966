# jobtech_mcp/tools/job_search.py
# SPDX-License-Identifier: Apache-2.0
"""
JobSearch API tools: live job ad search, single ad lookup and typeahead.

- af_search_jobs      GET /search
- af_get_job          GET /ad/{id}
- af_autocomplete     GET /complete
"""

import logging
from typing import Annotated, Literal, Optional
from urllib.parse import quote

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..constants import DEFAULT_LIMIT, MAX_LIMIT
from ..error_handler import handle_tool_errors, is_not_found
from ..formatters import format_hits, format_job_ad_full
from ..http import build_jobsearch_url, fetch_json_async
from .annotations import read_only
from .common import hits_of, range_header, search_params, text_result, total_of, unwrap_list

logger = logging.getLogger(__name__)

Detail = Literal["summary", "full"]


@handle_tool_errors("af_search_jobs")
async def search_jobs(
    q: Annotated[Optional[str], Field(description="Free-text search query")] = None,
    occupation_name: Annotated[Optional[str], Field(description="Occupation name to filter on")] = None,
    occupation_group: Annotated[Optional[str], Field(description="Occupation group ID")] = None,
    occupation_field: Annotated[Optional[str], Field(description="Occupation field ID")] = None,
    municipality: Annotated[Optional[str], Field(description="Municipality code, e.g. '0180' for Stockholm")] = None,
    region: Annotated[Optional[str], Field(description="Region/county code, e.g. '01' for Stockholm county")] = None,
    country: Annotated[Optional[str], Field(description="Country code, e.g. '199' for Sweden")] = None,
    employer: Annotated[Optional[str], Field(description="Employer organization number or name")] = None,
    experience: Annotated[
        Optional[bool], Field(description="true = requires experience, false = no experience required")
    ] = None,
    limit: Annotated[int, Field(ge=1, le=MAX_LIMIT, description="Number of results")] = DEFAULT_LIMIT,
    offset: Annotated[int, Field(ge=0, description="Pagination – skip N results")] = 0,
    detail: Annotated[Detail, Field(description="Detail level")] = "summary",
) -> ToolResult:
    """
    Search for job listings in the Swedish Public Employment Service (Arbetsförmedlingen)
    via the JobSearch API.

    Supports free-text search, occupation filters, geographic filtering, and more.
    Use af_search_taxonomy to find occupation/location IDs and af_get_job for a full listing.

    Examples:
      - Search "python" in Stockholm → q="python", municipality="0180"
      - Nurse listings without experience requirement → q="nurse", experience=false

    Returns:
        Matching job listings with title, employer, location, occupation and link.
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
        employer=employer,
        experience=experience,
    )
    url = build_jobsearch_url("/search", params)
    logger.info("JobSearch: %s", url)

    data = await fetch_json_async(url)
    total = total_of(data)
    hits = hits_of(data)

    if not hits:
        return text_result("No jobs found for your search.")

    header = f"Found {range_header(total, offset, len(hits), 'jobs')}"
    return text_result(
        header + format_hits(hits, detail),
        {"total": total, "offset": offset, "count": len(hits), "hits": hits},
    )


@handle_tool_errors("af_get_job")
async def get_job(
    id: Annotated[str, Field(min_length=1, description="The job listing ID")],
) -> ToolResult:
    """
    Fetch a full job listing from Arbetsförmedlingen by its listing ID.

    Listing IDs are found via af_search_jobs.

    Returns:
        Full job listing with description, requirements and application link.
    """
    url = build_jobsearch_url(f"/ad/{quote(id, safe='')}")
    try:
        ad = await fetch_json_async(url)
    except Exception as e:
        if is_not_found(e):
            return text_result(f'Job listing "{id}" was not found. It may have been removed.')
        raise

    return text_result(format_job_ad_full(ad), ad if isinstance(ad, dict) else {"ad": ad})


@handle_tool_errors("af_autocomplete")
async def autocomplete(
    q: Annotated[str, Field(min_length=2, description="The search term to autocomplete")],
    contextual_q: Annotated[Optional[str], Field(description="Existing search query for context")] = None,
) -> ToolResult:
    """
    Fetch autocomplete suggestions for job listing searches.

    Use this to find correct search terms before calling af_search_jobs,
    e.g. q="nurs" or q="java dev".

    Returns:
        Suggested search terms with occurrence counts.
    """
    url = build_jobsearch_url("/complete", {"q": q, "contextual_q": contextual_q or None})
    data = await fetch_json_async(url)
    suggestions = unwrap_list(data, ("typeahead",))

    if not suggestions:
        return text_result(f'No suggestions for "{q}".')

    lines = "\n".join(
        f"- {s.get('value')} ({s.get('occurrences')} listings, type: {s.get('type')})"
        for s in suggestions[:20]
    )
    return text_result(f'Suggestions for "{q}":\n{lines}', {"suggestions": suggestions})


def register_job_search_tools(mcp: FastMCP) -> None:
    """Register the JobSearch tools with the MCP server."""
    mcp.tool(search_jobs, name="af_search_jobs", annotations=read_only("Search jobs"), output_schema=None)
    mcp.tool(
        get_job,
        name="af_get_job",
        annotations=read_only("Get job listing", open_world=False),
        output_schema=None,
    )
    mcp.tool(autocomplete, name="af_autocomplete", annotations=read_only("Search suggestions"), output_schema=None)
