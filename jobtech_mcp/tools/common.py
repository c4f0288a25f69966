# jobtech_mcp/tools/common.py
"""Helpers shared by the tool modules."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from fastmcp.tools.tool import ToolResult

from ..formatters import truncate_if_needed


def search_params(limit: int, offset: int, **filters: Any) -> Dict[str, Any]:
    """
    Query params for the JobSearch-style ``/search`` endpoints.

    Filter names use underscores in the tool schema and dashes upstream
    (``occupation_name`` -> ``occupation-name``). Empty strings count as absent.
    """
    params: Dict[str, Any] = {"limit": limit, "offset": offset}
    for name, value in filters.items():
        if value is None or value == "":
            continue
        params[name.replace("_", "-")] = value
    return params


def hits_of(data: Any) -> List[Dict[str, Any]]:
    """``{"hits": [...]}`` or a bare list."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        hits = data.get("hits")
        if isinstance(hits, list):
            return hits
    return []


def total_of(data: Any, default: int = 0) -> int:
    if isinstance(data, dict):
        total = data.get("total")
        if isinstance(total, dict) and isinstance(total.get("value"), int):
            return total["value"]
    return default


def unwrap_list(data: Any, keys: Sequence[str]) -> List[Dict[str, Any]]:
    """Return ``data`` if it is a list, else the first list found under ``keys``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in keys:
            if isinstance(data.get(key), list):
                return data[key]
    return []


def text_result(text: str, structured: Optional[Dict[str, Any]] = None) -> ToolResult:
    """Text block (truncated to the character budget) plus optional structured payload."""
    return ToolResult(content=truncate_if_needed(text), structured_content=structured)


def range_header(total: int, offset: int, count: int, noun: str) -> str:
    return f"**{total}** {noun} (showing {offset + 1}–{offset + count}):\n\n"
