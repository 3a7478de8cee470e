"""
MCP server entrypoint for test-intelligence.

This module is intentionally thin:
- sets up the MCP server
- registers tools (from handlers)
- routes tool calls to handlers, passing the shared workspace registry
"""


from __future__ import annotations

import asyncio
import logging
import os

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent

from .constants import LOG_LEVEL_ENV_VAR
from .handlers.core import HANDLERS as CORE_HANDLERS
from .handlers.core import TOOLS as CORE_TOOLS
from .handlers.git import HANDLERS as GIT_HANDLERS
from .handlers.git import TOOLS as GIT_TOOLS
from .handlers.workspace import HANDLERS as WORKSPACE_HANDLERS
from .handlers.workspace import TOOLS as WORKSPACE_TOOLS
from .services import WorkspaceRegistry

# Configure logging
logging.basicConfig(level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper())
logger = logging.getLogger(__name__)

# Create the MCP server instance
server = Server("test-intelligence")

# Opened workspaces for this server process
workspaces = WorkspaceRegistry()


# =============================================================================
# Tool Registration
# =============================================================================

# Combine all tools
ALL_TOOLS = [*WORKSPACE_TOOLS, *CORE_TOOLS, *GIT_TOOLS]

# Combine all handlers
ALL_HANDLERS = {**WORKSPACE_HANDLERS, **CORE_HANDLERS, **GIT_HANDLERS}


@server.list_tools()
async def list_tools():
    """List all available tools."""
    return ALL_TOOLS


# =============================================================================
# Tool Router
# =============================================================================

@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Route tool calls to appropriate handlers."""
    logger.info(f"Tool called: {name}")

    handler = ALL_HANDLERS.get(name)

    if handler is None:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]

    try:
        return await handler(arguments or {}, workspaces)
    except (TypeError, ValueError) as e:
        logger.exception(f"Tool {name} failed")
        return [TextContent(type="text", text=f"Error: invalid arguments for {name}: {e}")]


# =============================================================================
# Entry Point
# =============================================================================

async def run_server():
    """Run the MCP server."""
    logger.info("Starting Test Intelligence MCP Server...")
    logger.info(f"Registered {len(ALL_TOOLS)} tools: {[t.name for t in ALL_TOOLS]}")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Entry point."""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
