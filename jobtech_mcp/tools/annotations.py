# jobtech_mcp/tools/annotations.py
"""Shared MCP tool annotations. Every tool here is read-only."""
from mcp.types import ToolAnnotations


def read_only(title: str, *, idempotent: bool = True, open_world: bool = True) -> ToolAnnotations:
    return ToolAnnotations(
        title=title,
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=idempotent,
        openWorldHint=open_world,
    )
