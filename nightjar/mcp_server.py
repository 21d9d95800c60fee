"""
MCP (Model Context Protocol) server for Adobe Launch analysis.

Exposes the parse, analyze and list tools over stdio. All tools share one
session, so a library parsed by one call is queried by the next.
"""

from typing import Awaitable, Callable, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from nightjar import __version__
from nightjar.config import Settings, get_settings
from nightjar.session import NightjarSession
from nightjar.tools import NightjarTools
from nightjar.utils.errors import NightjarException
from nightjar.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

SERVER_NAME = "nightjar-adobe-launch"

TOOL_NAMES = (
    "parse_embed_code",
    "parse_embed_from_url",
    "analyze_rule",
    "analyze_data_element",
    "analyze_variable",
    "list_rules",
    "list_data_elements",
    "list_variables",
)


async def _call(name: str, handler: Callable[..., Awaitable[str]], **kwargs) -> str:
    logger.info(f"Received call_tool request for: {name}")
    try:
        return await handler(**kwargs)
    except NightjarException as e:
        logger.error(f"Error in {name}: {e.message}")
        raise ToolError(e.message) from e


def create_server(session: NightjarSession) -> FastMCP:
    """
    Build the MCP server around a session.

    Args:
        session: Session shared by every tool

    Returns:
        FastMCP server with all tools registered
    """
    tools = NightjarTools(session)
    server = FastMCP(SERVER_NAME)

    @server.tool()
    async def parse_embed_code(embed_code: str) -> str:
        """Parse an Adobe Launch embed code URL and extract its configuration.

        Args:
            embed_code: The Adobe Launch embed code URL (e.g., https://assets.adobedtm.com/xxx/xxx/launch-xxx.min.js)
        """
        return await _call("parse_embed_code", tools.parse_embed_code, embed_code=embed_code)

    @server.tool()
    async def parse_embed_from_url(url: str) -> str:
        """Find the Adobe Launch embed code on a website and parse it.

        Args:
            url: The website URL to scan for an Adobe Launch embed code
        """
        return await _call("parse_embed_from_url", tools.parse_embed_from_url, url=url)

    @server.tool()
    async def analyze_rule(rule_name: str, embed_code: Optional[str] = None, use_ai: bool = False) -> str:
        """Analyze a specific rule in the Adobe Launch implementation.

        Args:
            rule_name: The exact name of the rule to analyze
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
            use_ai: Whether to use AI for a more detailed analysis (requires an OpenAI API key)
        """
        return await _call(
            "analyze_rule", tools.analyze_rule, rule_name=rule_name, embed_code=embed_code, use_ai=use_ai
        )

    @server.tool()
    async def analyze_data_element(element_name: str, embed_code: Optional[str] = None, use_ai: bool = False) -> str:
        """Analyze a specific data element in the Adobe Launch implementation.

        Args:
            element_name: The exact name of the data element to analyze
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
            use_ai: Whether to use AI for a more detailed analysis (requires an OpenAI API key)
        """
        return await _call(
            "analyze_data_element",
            tools.analyze_data_element,
            element_name=element_name,
            embed_code=embed_code,
            use_ai=use_ai,
        )

    @server.tool()
    async def analyze_variable(variable_name: str, embed_code: Optional[str] = None, use_ai: bool = False) -> str:
        """Analyze where an Adobe Analytics variable (eVar, prop or event) is set.

        Args:
            variable_name: The variable to analyze (e.g., eVar1, prop5, event10)
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
            use_ai: Whether to use AI for a more detailed analysis (requires an OpenAI API key)
        """
        return await _call(
            "analyze_variable",
            tools.analyze_variable,
            variable_name=variable_name,
            embed_code=embed_code,
            use_ai=use_ai,
        )

    @server.tool()
    async def list_rules(embed_code: Optional[str] = None) -> str:
        """List all rules found in the Adobe Launch embed code.

        Args:
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
        """
        return await _call("list_rules", tools.list_rules, embed_code=embed_code)

    @server.tool()
    async def list_data_elements(embed_code: Optional[str] = None) -> str:
        """List all data elements found in the Adobe Launch embed code.

        Args:
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
        """
        return await _call("list_data_elements", tools.list_data_elements, embed_code=embed_code)

    @server.tool()
    async def list_variables(embed_code: Optional[str] = None) -> str:
        """List all Adobe Analytics variables used in the Launch embed code.

        Args:
            embed_code: The embed code to parse (optional if you've already called parse_embed_code)
        """
        return await _call("list_variables", tools.list_variables, embed_code=embed_code)

    logger.info(f"Nightjar MCP server {__version__} created with {len(TOOL_NAMES)} tools")
    return server


def run_server(settings: Optional[Settings] = None) -> None:
    """Create a session from settings and serve it over stdio until stopped."""
    settings = settings or get_settings()
    session = NightjarSession.from_settings(settings)

    if not settings.ai_enabled:
        logger.warning("No OpenAI API key configured; AI analysis is disabled")

    logger.info("Starting Nightjar MCP server...")
    try:
        create_server(session).run()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


def main() -> None:
    """Console entry point for the MCP server."""
    setup_logging()
    run_server()


if __name__ == "__main__":
    main()
