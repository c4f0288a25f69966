# jobtech_mcp/tools/enrichment.py
# SPDX-License-Identifier: Apache-2.0
"""
JobAd Enrichments tools.

- af_enrich_job_text      POST /enrichtextdocuments (or ...binary when only_requested)
- af_synonym_dictionary   GET  /synonymdictionary
"""

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..error_handler import handle_tool_errors
from ..http import build_enrichment_url, fetch_json_async, post_json_async
from .annotations import read_only
from .common import text_result, unwrap_list

logger = logging.getLogger(__name__)

CANDIDATE_GROUPS = (
    ("occupations", "Occupations"),
    ("competencies", "Competencies"),
    ("traits", "Personal traits"),
    ("geos", "Geographies"),
)


def _format_terms(title: str, terms: Optional[List[Dict[str, Any]]]) -> List[str]:
    if not terms:
        return []
    lines = [f"### {title}"]
    for t in terms:
        prediction = t.get("prediction")
        pred = f" (probability: {prediction:.2f})" if isinstance(prediction, (int, float)) else ""
        lines.append(f"- **{t.get('concept_label') or t.get('term')}**{pred} — Extracted as: `{t.get('term')}`")
    lines.append("")
    return lines


@handle_tool_errors("af_enrich_job_text")
async def enrich_job_text(
    text: Annotated[
        str, Field(min_length=10, max_length=10000, description="The job listing to analyse (max 10,000 characters)")
    ],
    only_requested: Annotated[bool, Field(description="Return only terms classified as requested")] = False,
) -> ToolResult:
    """
    Analyse a job listing text and extract relevant labour market terms.

    Returns identified occupations, competencies, personal traits and geographies,
    each with a probability score (0.0–1.0) of the term being *requested* by the employer.
    Closer to 1.0 = explicitly requested. Closer to 0.0 = mentioned but not required.
    With only_requested=true, only terms above the classification threshold are returned.
    """
    endpoint = "/enrichtextdocumentsbinary" if only_requested else "/enrichtextdocuments"
    url = build_enrichment_url(endpoint)

    data = await post_json_async(url, {"documents_input": [{"doc_id": "1", "doc_text": text}]})

    documents = data if isinstance(data, list) else [data]
    doc = documents[0] if documents and isinstance(documents[0], dict) else {}
    candidates = doc.get("enriched_candidates") or {}

    lines = ["## Enrichment results\n"]
    for key, title in CANDIDATE_GROUPS:
        lines += _format_terms(title, candidates.get(key))

    return text_result("\n".join(lines), {"results": data})


@handle_tool_errors("af_synonym_dictionary")
async def synonym_dictionary(
    q: Annotated[Optional[str], Field(description="Search for a specific term or synonym")] = None,
    concept_type: Annotated[
        Literal["COMPETENCE", "OCCUPATION", "TRAIT", "GEO"], Field(description="Type, e.g. 'OCCUPATION', 'COMPETENCE'")
    ] = "OCCUPATION",
    limit: Annotated[int, Field(ge=1, le=100)] = 20,
) -> ToolResult:
    """
    Fetch synonyms for labour market terms from the JobAd Enrichments synonym dictionary.

    Useful for understanding how different spellings, plural/singular forms and synonyms
    map to a common search concept. Leave q empty to list entries of the given type.
    """
    url = build_enrichment_url("/synonymdictionary", {"type": concept_type, "spelling": "BOTH"})
    data = await fetch_json_async(url)
    entries = unwrap_list(data, ("items",))

    if q:
        needle = q.lower()
        entries = [
            e for e in entries
            if needle in str(e.get("term", "")).lower() or needle in str(e.get("concept", "")).lower()
        ]

    if not entries:
        return text_result("No synonyms found.")

    lines = [f"- **{e.get('concept')}** ({e.get('type')}): {e.get('term')}" for e in entries[:limit]]
    return text_result("Synonyms:\n\n" + "\n".join(lines), {"entries": entries})


def register_enrichment_tools(mcp: FastMCP) -> None:
    mcp.tool(
        enrich_job_text,
        name="af_enrich_job_text",
        annotations=read_only("Enrich job listing text", idempotent=False, open_world=False),
        output_schema=None,
    )
    mcp.tool(
        synonym_dictionary,
        name="af_synonym_dictionary",
        annotations=read_only("Synonym dictionary for labour market terms", open_world=False),
        output_schema=None,
    )
