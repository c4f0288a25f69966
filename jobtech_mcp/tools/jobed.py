# jobtech_mcp/tools/jobed.py
# SPDX-License-Identifier: Apache-2.0
"""
JobEd Connect tools: match educations and occupations in both directions.

- af_education_to_occupations   POST /v1/occupations/match-by-education?education_id=..&limit=..
- af_occupation_to_educations   POST /v1/educations/match-by-occupation?occupation_id=..&limit=..

Both endpoints take their inputs as query params with an empty JSON body.
The API documents no response schema, so both a bare array and the usual
wrapper keys are accepted.
"""

import logging
from typing import Annotated, Any, Dict

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from ..error_handler import handle_tool_errors, is_not_found
from ..http import build_jobed_url, post_json_async
from .annotations import read_only
from .common import text_result, unwrap_list

logger = logging.getLogger(__name__)

WRAPPER_KEYS = ("occupations", "educations", "items", "hits", "result", "results")
MAX_MATCHES = 50


def _str(value: Any) -> str:
    return value if isinstance(value, str) else str(value if value is not None else "")


def _first(item: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return default


def _score(item: Dict[str, Any]) -> str:
    score, prediction = item.get("score"), item.get("prediction")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        return f" (match: {score * 100:.0f}%)"
    if isinstance(prediction, (int, float)) and not isinstance(prediction, bool):
        return f" (score: {prediction:.2f})"
    return ""


def format_occupation_match(i: int, o: Dict[str, Any]) -> str:
    label = _str(_first(o, "occupation_label", "label", "name", "occupation_id", "id", default="Unknown"))
    ssyk = f" [SSYK: {_str(o['ssyk_code'])}]" if o.get("ssyk_code") else ""
    concept = _first(o, "concept_id", "occupation_id")
    concept_id = f" [ID: {_str(concept)}]" if concept else ""
    return f"{i}. **{label}**{_score(o)}{ssyk}{concept_id}"


def format_education_match(i: int, e: Dict[str, Any]) -> str:
    label = _str(_first(e, "education_label", "label", "name", "education_id", "id", default="Unknown"))
    if e.get("education_code"):
        code = f" [code: {_str(e['education_code'])}]"
    elif e.get("sun_code"):
        code = f" [SUN: {_str(e['sun_code'])}]"
    else:
        code = ""
    form = e.get("education_form") or e.get("level")
    form = f" — {_str(form)}" if form else ""
    return f"{i}. **{label}**{_score(e)}{code}{form}"


@handle_tool_errors("af_education_to_occupations")
async def education_to_occupations(
    education_id: Annotated[
        str,
        Field(min_length=1, description='Susa-Navet education ID (e.g. "i.sv.ft001").'),
    ],
    limit: Annotated[int, Field(ge=1, le=MAX_MATCHES)] = 10,
) -> ToolResult:
    """
    Find which occupations a given education leads to via the JobEd Connect API.

    The matching is based on learning objectives in education descriptions and the
    competencies that employers request in job listings.

    Returns:
        Matched occupations with scores (where available).
    """
    url = build_jobed_url("/v1/occupations/match-by-education", {"education_id": education_id, "limit": limit})
    try:
        raw = await post_json_async(url, {})
    except Exception as e:
        if is_not_found(e):
            return text_result(
                f'No occupation matches found for education ID "{education_id}". '
                "Verify the ID via the /v1/educations endpoint."
            )
        raise

    occupations = unwrap_list(raw, WRAPPER_KEYS)
    if not occupations:
        return text_result(f'No occupation matches found for education ID "{education_id}".')

    lines = [format_occupation_match(i, o) for i, o in enumerate(occupations, start=1)]
    return text_result(
        f"Occupations for education `{education_id}`:\n\n" + "\n".join(lines),
        {"count": len(occupations), "occupations": raw},
    )


@handle_tool_errors("af_occupation_to_educations")
async def occupation_to_educations(
    occupation_id: Annotated[
        str,
        Field(
            min_length=1,
            description='Taxonomy concept ID for the occupation (e.g. "i46j_HmG_v64"). Use af_search_taxonomy to find it.',
        ),
    ],
    limit: Annotated[int, Field(ge=1, le=MAX_MATCHES)] = 10,
) -> ToolResult:
    """
    Find which educations best match an occupation via the JobEd Connect API.

    Use af_search_taxonomy with type "occupation-name" to find valid concept IDs.

    Returns:
        Matched educations with scores and education codes (where available).
    """
    url = build_jobed_url("/v1/educations/match-by-occupation", {"occupation_id": occupation_id, "limit": limit})
    try:
        raw = await post_json_async(url, {})
    except Exception as e:
        if is_not_found(e):
            return text_result(
                f'No education matches found for occupation ID "{occupation_id}". '
                'Find valid concept IDs with af_search_taxonomy (type: "occupation-name").'
            )
        raise

    educations = unwrap_list(raw, WRAPPER_KEYS)
    if not educations:
        return text_result(f'No education matches found for occupation ID "{occupation_id}".')

    lines = [format_education_match(i, e) for i, e in enumerate(educations, start=1)]
    return text_result(
        f"Educations for occupation `{occupation_id}`:\n\n" + "\n".join(lines),
        {"count": len(educations), "educations": raw},
    )


def register_jobed_tools(mcp: FastMCP) -> None:
    mcp.tool(
        education_to_occupations,
        name="af_education_to_occupations",
        annotations=read_only("Find occupations from education (JobEd Connect)", open_world=False),
        output_schema=None,
    )
    mcp.tool(
        occupation_to_educations,
        name="af_occupation_to_educations",
        annotations=read_only("Find educations from occupation (JobEd Connect)", open_world=False),
        output_schema=None,
    )
