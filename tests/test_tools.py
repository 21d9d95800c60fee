"""
Tests for the tool handlers and the MCP server wiring.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from nightjar.generator import AnalysisGenerator
from nightjar.mcp_server import SERVER_NAME, TOOL_NAMES, create_server
from nightjar.session import NightjarSession
from nightjar.tools import NightjarTools, format_variable_list
from nightjar.utils.errors import NoModelParsedError, ToolInputError

from conftest import EMBED_URL


@pytest.fixture
def tools(session):
    return NightjarTools(session)


class TestParseTools:
    """Test the parse tools."""

    @pytest.mark.asyncio
    async def test_parse_embed_code(self, tools):
        text = await tools.parse_embed_code(EMBED_URL)

        assert text == (
            "Successfully parsed Adobe Launch implementation!\n\n"
            "Found 3 data elements\n"
            "Found 3 rules\n"
            "Detected variables: eVar5, prop2, event10, event12\n\n"
            "You can now use other tools like analyze_rule, analyze_data_element, "
            "or analyze_variable to explore the implementation."
        )

    @pytest.mark.asyncio
    async def test_missing_embed_code(self, tools):
        with pytest.raises(ToolInputError, match="Missing required parameter: embed_code"):
            await tools.parse_embed_code("")

    @pytest.mark.asyncio
    async def test_parse_embed_from_url(self, tools, fetcher):
        fetcher.responses["https://www.example.com/"] = f'<script src="{EMBED_URL}"></script>'

        text = await tools.parse_embed_from_url("https://www.example.com/")

        assert text.startswith("Successfully parsed Adobe Launch implementation from https://www.example.com/!")
        assert f"Found embed code: {EMBED_URL}" in text

    @pytest.mark.asyncio
    async def test_missing_url(self, tools):
        with pytest.raises(ToolInputError, match="url"):
            await tools.parse_embed_from_url(None)


class TestQueryTools:
    """Test the analyze and list tools."""

    @pytest.mark.asyncio
    async def test_requires_parse_first(self, tools):
        with pytest.raises(NoModelParsedError):
            await tools.list_rules()

    @pytest.mark.asyncio
    async def test_embed_code_parsed_first(self, tools, fetcher):
        text = await tools.analyze_rule("PageLoad", embed_code=EMBED_URL)

        assert text.startswith("Rule: PageLoad")
        assert fetcher.calls == [EMBED_URL]

    @pytest.mark.asyncio
    async def test_missing_rule_name(self, tools):
        with pytest.raises(ToolInputError, match="rule_name"):
            await tools.analyze_rule(None, embed_code=EMBED_URL)

    @pytest.mark.asyncio
    async def test_list_rules(self, tools):
        await tools.parse_embed_code(EMBED_URL)
        assert await tools.list_rules() == "Found 3 rules:\n\nPageLoad\nLink Click\nRemote Code"

    @pytest.mark.asyncio
    async def test_list_data_elements(self, tools):
        await tools.parse_embed_code(EMBED_URL)
        assert await tools.list_data_elements() == "Found 3 data elements:\n\nPage Name\nVisitor Type\nUser ID"

    @pytest.mark.asyncio
    async def test_list_variables(self, tools):
        await tools.parse_embed_code(EMBED_URL)

        assert await tools.list_variables() == (
            "Found 4 variables in the parsed embed code:\n\n"
            "eVars (1): eVar5\n"
            "Props (1): prop2\n"
            "Events (2): event10, event12"
        )

    def test_variable_list_others_and_empty(self):
        assert format_variable_list({}) == "No variables found in the parsed embed code."
        assert format_variable_list({"list1": ["A"]}).endswith("Others (1): list1")

    @pytest.mark.asyncio
    async def test_empty_rule_list(self, tools):
        await tools.session.parse_bundle_text("window._satellite.container={};")
        assert await tools.list_rules() == "No rules found in the parsed embed code."

    @pytest.mark.asyncio
    async def test_use_ai_only_when_true(self, fetcher):
        generator = MagicMock(spec=AnalysisGenerator)
        generator.analyze = AsyncMock(return_value="AI text")
        tools = NightjarTools(NightjarSession(fetcher, generator=generator))
        await tools.parse_embed_code(EMBED_URL)

        assert (await tools.analyze_variable("eVar5")).startswith("Variable: eVar5")
        assert await tools.analyze_variable("eVar5", use_ai=True) == "AI text"
        generator.analyze.assert_awaited_once()


class TestServer:
    """Test the FastMCP server wiring."""

    @pytest.mark.asyncio
    async def test_registers_all_tools(self, session):
        server = create_server(session)
        tools = await server.list_tools()

        assert server.name == SERVER_NAME
        assert sorted(tool.name for tool in tools) == sorted(TOOL_NAMES)

    @pytest.mark.asyncio
    async def test_analyze_rule_schema(self, session):
        tools = {tool.name: tool for tool in await create_server(session).list_tools()}
        schema = tools["analyze_rule"].inputSchema

        assert schema["required"] == ["rule_name"]
        assert set(schema["properties"]) == {"rule_name", "embed_code", "use_ai"}

    @pytest.mark.asyncio
    async def test_errors_become_tool_errors(self, session):
        server = create_server(session)

        with pytest.raises(ToolError, match="No embed code has been parsed yet"):
            await server.call_tool("list_rules", {})

    @pytest.mark.asyncio
    async def test_tool_call_round_trip(self, session):
        server = create_server(session)
        await server.call_tool("parse_embed_code", {"embed_code": EMBED_URL})

        result = await server.call_tool("list_rules", {})

        # Newer SDKs return (content, structured) from call_tool
        content = result[0] if isinstance(result, tuple) else result
        assert "Found 3 rules" in content[0].text

    @pytest.mark.asyncio
    async def test_lookup_error_message(self, session):
        server = create_server(session)
        await server.call_tool("parse_embed_code", {"embed_code": EMBED_URL})

        with pytest.raises(ToolError) as exc_info:
            await server.call_tool("analyze_rule", {"rule_name": "Missing"})

        assert "Rule 'Missing' not found" in str(exc_info.value)
