# jobtech_mcp/tools/job_stream.py
# SPDX-License-Identifier: Apache-2.0
"""
JobStream v2 tool: new, updated and removed ads in a time window.

GET /v2/stream?updated-after=<ISO>&updated-before=<ISO>
(the deprecated /stream endpoint used ``date``; v2 uses ``updated-after``)
"""

import logging
from typing import Annotated, List, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..error_handler import handle_tool_errors
from ..http import build_jobstream_url, fetch_json_async
from .annotations import read_only
from .common import text_result, unwrap_list

logger = logging.getLogger(__name__)

LISTED_PER_SECTION = 20
STRUCTURED_EVENT_CAP = 100


def _section(title: str, events: List[dict], line) -> List[str]:
    if not events:
        return []
    lines = [title]
    lines.extend(line(e) for e in events[:LISTED_PER_SECTION])
    if len(events) > LISTED_PER_SECTION:
        lines.append(f"  ...and {len(events) - LISTED_PER_SECTION} more")
    return lines


@handle_tool_errors("af_stream_jobs")
async def stream_jobs(
    date: Annotated[
        str,
        Field(description="Start datetime (ISO 8601 e.g. '2024-06-01T00:00:00'). Fetches events since this point."),
    ],
    date_before: Annotated[Optional[str], Field(description="End datetime (ISO 8601). Defaults to now.")] = None,
    occupation_concept_id: Annotated[
        Optional[List[str]], Field(description="Filter by occupation concept IDs from af_search_taxonomy")
    ] = None,
    location_concept_id: Annotated[
        Optional[List[str]], Field(description="Filter by location concept IDs from af_search_taxonomy")
    ] = None,
) -> ToolResult:
    """
    Fetch real-time events (new, updated, and removed job listings) from the JobStream v2 API.

    Ideal for keeping a local database in sync with the Swedish labour market.
    Events contain full listing data for new/updated ads, and ID-only for removed ads.
    Large time ranges can return large volumes; prefer narrow windows.

    Returns:
        Events since the given date. Removed listings are marked with removed=true.
    """
    url = build_jobstream_url(
        "/v2/stream",
        {
            "updated-after": date,
            "updated-before": date_before or None,
            "occupation-concept-id": occupation_concept_id or None,
            "location-concept-id": location_concept_id or None,
        },
    )
    logger.info("JobStream: %s", url)

    data = await fetch_json_async(url)
    # the API answers either {"events": [...]} or a bare list
    events = unwrap_list(data, ("events",))

    if not events:
        return text_result(f"No events found since {date}.")

    removed = [e for e in events if e.get("removed")]
    active = [e for e in events if not e.get("removed")]

    lines = [
        f"**{len(events)} events** since {date}",
        f"New/updated: {len(active)} | Removed: {len(removed)}",
        "",
    ]
    lines += _section(
        "### New/updated listings",
        active,
        lambda e: f"- [{e.get('id')}] {e.get('headline') or '(no title)'} — {(e.get('employer') or {}).get('name', '')}",
    )
    lines += _section(
        "\n### Removed listings",
        removed,
        lambda e: f"- [{e.get('id')}] removed {e.get('removed_date') or ''}",
    )

    return text_result(
        "\n".join(lines),
        {
            "total": len(events),
            "new_or_updated": len(active),
            "removed": len(removed),
            "events": events[:STRUCTURED_EVENT_CAP],
        },
    )


def register_job_stream_tools(mcp: FastMCP) -> None:
    mcp.tool(
        stream_jobs,
        name="af_stream_jobs",
        annotations=read_only("Fetch job events from stream (JobStream v2)"),
        output_schema=None,
    )
