# jobtech_mcp/tools/__init__.py
# SPDX-License-Identifier: Apache-2.0
"""
JobTech MCP tools, one module per upstream API.

- job_search: af_search_jobs, af_get_job, af_autocomplete
- job_stream: af_stream_jobs
- historical: af_search_historical_jobs
- enrichment: af_enrich_job_text, af_synonym_dictionary
- links:      af_search_job_links
- jobed:      af_education_to_occupations, af_occupation_to_educations
- taxonomy:   af_search_taxonomy, af_get_taxonomy_concept, af_list_taxonomy_types

All tools share the fetch policy in jobtech_mcp.http and the error mapping in
jobtech_mcp.error_handler.
"""

from __future__ import annotations

from fastmcp import FastMCP

from .enrichment import register_enrichment_tools
from .historical import register_historical_tools
from .job_search import register_job_search_tools
from .job_stream import register_job_stream_tools
from .jobed import register_jobed_tools
from .links import register_links_tools
from .taxonomy import register_taxonomy_tools

TOOL_NAMES = [
    "af_search_jobs", "af_get_job", "af_autocomplete",
    "af_stream_jobs",
    "af_search_historical_jobs",
    "af_enrich_job_text", "af_synonym_dictionary",
    "af_search_job_links",
    "af_education_to_occupations", "af_occupation_to_educations",
    "af_search_taxonomy", "af_get_taxonomy_concept", "af_list_taxonomy_types",
]


def register_all_tools(mcp: FastMCP) -> None:
    """
    Register all JobTech MCP tools in one call.

    Usage:
        mcp = FastMCP("arbetsformedlingen-mcp-server")
        register_all_tools(mcp)
    """
    # === JobSearch API ===
    register_job_search_tools(mcp)
    # === JobStream API ===
    register_job_stream_tools(mcp)
    # === Historical Job Ads API ===
    register_historical_tools(mcp)
    # === JobAd Enrichments API ===
    register_enrichment_tools(mcp)
    # === JobAd Links API ===
    register_links_tools(mcp)
    # === JobEd Connect API ===
    register_jobed_tools(mcp)
    # === Taxonomy API ===
    register_taxonomy_tools(mcp)


__all__ = ["TOOL_NAMES", "register_all_tools"]
