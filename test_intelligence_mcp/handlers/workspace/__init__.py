"""Registry for workspace MCP tool definitions and handlers."""

from .close_workspace import (
    TOOL_DEFINITION as CLOSE_WORKSPACE_TOOL,
    handle as handle_close_workspace,
)
from .open_workspace import (
    TOOL_DEFINITION as OPEN_WORKSPACE_TOOL,
    handle as handle_open_workspace,
)

# All workspace tool definitions
TOOLS = [
    OPEN_WORKSPACE_TOOL,
    CLOSE_WORKSPACE_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "open_workspace": handle_open_workspace,
    "close_workspace": handle_close_workspace,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "OPEN_WORKSPACE_TOOL",
    "CLOSE_WORKSPACE_TOOL",
    # Handlers
    "HANDLERS",
    "handle_open_workspace",
    "handle_close_workspace",
]
