import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError
from starlette.testclient import TestClient

from jobtech_mcp.exceptions import ServerError
from jobtech_mcp.server import create_mcp_server
from jobtech_mcp.tools import TOOL_NAMES, taxonomy


@pytest.mark.asyncio
async def test_all_tools_registered_read_only():
    mcp = create_mcp_server()
    async with Client(mcp) as client:
        tools = await client.list_tools()

    assert sorted(t.name for t in tools) == sorted(TOOL_NAMES)
    for tool in tools:
        assert tool.description
        assert tool.annotations.readOnlyHint is True
        assert tool.annotations.destructiveHint is False


@pytest.mark.asyncio
async def test_input_schema_bounds():
    mcp = create_mcp_server()
    async with Client(mcp) as client:
        tools = {t.name: t for t in await client.list_tools()}

    props = tools["af_search_jobs"].inputSchema["properties"]
    assert props["limit"]["maximum"] == 100
    assert props["limit"]["default"] == 10
    assert tools["af_get_job"].inputSchema["required"] == ["id"]


@pytest.mark.asyncio
async def test_call_tool_round_trip(upstream):
    upstream(taxonomy, [{"taxonomy/id": "a", "taxonomy/type": "skill", "taxonomy/preferred-label": "Python"}])
    mcp = create_mcp_server()
    async with Client(mcp) as client:
        result = await client.call_tool("af_search_taxonomy", {"q": "python"})

    assert result.structured_content["count"] == 1
    assert "**Python**" in result.content[0].text


@pytest.mark.asyncio
async def test_call_tool_reports_upstream_failure(upstream):
    upstream(taxonomy, lambda url: ServerError("GET API request failed: 503", 503, url))
    mcp = create_mcp_server()
    async with Client(mcp) as client:
        with pytest.raises(ToolError) as exc:
            await client.call_tool("af_list_taxonomy_types", {"type": "region"})
    assert "503" in str(exc.value)


def test_health_route():
    app = create_mcp_server().http_app()
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["server"] == "arbetsformedlingen-mcp-server"
    assert body["tools"] == TOOL_NAMES
