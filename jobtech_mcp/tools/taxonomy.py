# jobtech_mcp/tools/taxonomy.py
# SPDX-License-Identifier: Apache-2.0
"""
JobTech Taxonomy tools.

- af_search_taxonomy        GET /v1/taxonomy/suggesters/autocomplete
- af_get_taxonomy_concept   GET /v1/taxonomy/main/concepts (concept + broader/narrower/related, in parallel)
- af_list_taxonomy_types    GET /v1/taxonomy/main/concepts?type=..
"""

import asyncio
import logging
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..error_handler import handle_tool_errors, is_not_found
from ..http import build_taxonomy_url, fetch_json_async
from .annotations import read_only
from .common import text_result

logger = logging.getLogger(__name__)

CONCEPTS_PATH = "/v1/taxonomy/main/concepts"
RELATIONS = ("broader", "narrower", "related")
LIST_TYPE_LIMIT = 500


def to_concept(item: Dict[str, Any]) -> Dict[str, Any]:
    """Map the API's namespaced keys (``taxonomy/id`` ...) to plain ones."""
    return {
        "conceptId": item.get("taxonomy/id"),
        "type": item.get("taxonomy/type"),
        "preferredLabel": item.get("taxonomy/preferred-label"),
        "deprecated": item.get("taxonomy/deprecated"),
        "definition": item.get("taxonomy/definition"),
    }


def _concepts(data: Any) -> List[Dict[str, Any]]:
    return [to_concept(i) for i in data if isinstance(i, dict)] if isinstance(data, list) else []


@handle_tool_errors("af_search_taxonomy")
async def search_taxonomy(
    q: Annotated[
        str, Field(min_length=1, max_length=100, description="Search query (e.g. 'nurse' or 'software developer')")
    ],
    type: Annotated[
        Optional[str], Field(description="Filter by concept type (e.g. 'occupation-name' or 'skill')")
    ] = None,
    limit: Annotated[int, Field(ge=1, le=100, description="Max number of results to return (default 20)")] = 20,
) -> ToolResult:
    """
    Search all concepts (occupations, competencies, languages, driving licences, etc.) in the
    official taxonomy for the Swedish labour market.

    Essential for finding the exact terms, concept IDs and types used when searching for job
    listings. For example, "programmer" resolves to the system term "Software developer".
    Once you have a concept ID, use af_get_taxonomy_concept to see how it relates to others.

    Common types: occupation-name, skill, occupation-field, occupation-group, language,
    driving-licence.

    Returns:
        Matching concepts with their ID, preferred label and type.
    """
    url = build_taxonomy_url(
        "/v1/taxonomy/suggesters/autocomplete",
        {"query-string": q, "limit": limit, "type": type or None},
    )
    concepts = _concepts(await fetch_json_async(url))

    if not concepts:
        return text_result(f'No taxonomy concepts found for "{q}".')

    lines = [f'Found **{len(concepts)}** concepts for "{q}":\n']
    for c in concepts:
        line = f"- **{c['preferredLabel']}** (id: `{c['conceptId']}`, type: `{c['type']}`)"
        if c["deprecated"]:
            line += " *(DEPRECATED)*"
        lines.append(line)

    return text_result("\n".join(lines), {"query": q, "count": len(concepts), "concepts": concepts})


@handle_tool_errors("af_get_taxonomy_concept")
async def get_taxonomy_concept(
    concept_id: Annotated[str, Field(min_length=1, description="The concept ID")],
) -> ToolResult:
    """
    Fetch detailed information about a taxonomy concept including its hierarchical relations.

    Shows parent (broader), child (narrower) and related concepts. Useful for navigating the
    occupation hierarchy (occupation-field → occupation-group → occupation-name).
    """
    urls = [build_taxonomy_url(CONCEPTS_PATH, {"id": concept_id, "include-deprecated": "true"})]
    urls += [
        build_taxonomy_url(
            CONCEPTS_PATH, {"related-ids": concept_id, "relation": relation, "include-deprecated": "true"}
        )
        for relation in RELATIONS
    ]

    not_found = text_result(f'Taxonomy concept with ID "{concept_id}" not found.')
    try:
        concept_res, broader_res, narrower_res, related_res = await asyncio.gather(
            *(fetch_json_async(u) for u in urls)
        )
    except Exception as e:
        if is_not_found(e):
            return not_found
        raise

    base = _concepts(concept_res)
    if not base:
        return not_found

    concept = dict(base[0])
    concept["broader"] = _concepts(broader_res)
    concept["narrower"] = _concepts(narrower_res)
    concept["related"] = _concepts(related_res)

    lines = [
        f"## {concept['preferredLabel']}",
        f"**ID:** `{concept['conceptId']}`",
        f"**Type:** {concept['type'] or 'unknown'}",
    ]
    if concept["deprecated"]:
        lines.append("⚠️ **Deprecated concept**")
    if concept["definition"]:
        lines.append(f"\n**Definition:** {concept['definition']}")

    if concept["broader"]:
        lines.append("\n**Parent (broader):**")
        lines += [f"  - {b['preferredLabel']} (`{b['conceptId']}`)" for b in concept["broader"]]
    narrower = concept["narrower"]
    if narrower:
        lines.append(f"\n**Children (narrower) ({len(narrower)}):**")
        lines += [f"  - {n['preferredLabel']} (`{n['conceptId']}`)" for n in narrower[:20]]
        if len(narrower) > 20:
            lines.append(f"  ...and {len(narrower) - 20} more")
    if concept["related"]:
        lines.append("\n**Related:**")
        lines += [f"  - {r['preferredLabel']} (`{r['conceptId']}`)" for r in concept["related"][:10]]

    return text_result("\n".join(lines), {"concept": concept})


@handle_tool_errors("af_list_taxonomy_types")
async def list_taxonomy_types(
    type: Annotated[str, Field(min_length=1, description="Taxonomy type to list")],
    include_deprecated: Annotated[bool, Field(description="Include deprecated concepts")] = False,
) -> ToolResult:
    """
    List all concepts of a specific type in the taxonomy, e.g. all occupation fields or all regions.

    Common types: "occupation-field" (~10 entries), "occupation-group" (~100 entries),
    "region", "country", "employment-type", "driving-licence", "language".
    """
    url = build_taxonomy_url(
        CONCEPTS_PATH,
        {"type": type, "include-deprecated": include_deprecated, "limit": LIST_TYPE_LIMIT},
    )
    try:
        concepts = _concepts(await fetch_json_async(url))
    except Exception as e:
        if is_not_found(e):
            return text_result(f'No taxonomy concepts of type "{type}" found.')
        raise

    if not concepts:
        return text_result(f'No concepts found for type "{type}".')

    active = concepts if include_deprecated else [c for c in concepts if not c["deprecated"]]
    lines = [f"- **{c['preferredLabel']}** — `{c['conceptId']}`" for c in active]
    return text_result(
        f'**{len(active)}** concepts of type "{type}":\n\n' + "\n".join(lines),
        {"type": type, "count": len(active), "concepts": active},
    )


def register_taxonomy_tools(mcp: FastMCP) -> None:
    mcp.tool(
        search_taxonomy,
        name="af_search_taxonomy",
        annotations=read_only("Search the JobTech Taxonomy"),
        output_schema=None,
    )
    mcp.tool(
        get_taxonomy_concept,
        name="af_get_taxonomy_concept",
        annotations=read_only("Get taxonomy concept with relations", open_world=False),
        output_schema=None,
    )
    mcp.tool(
        list_taxonomy_types,
        name="af_list_taxonomy_types",
        annotations=read_only("List all taxonomy concepts of a type", open_world=False),
        output_schema=None,
    )
