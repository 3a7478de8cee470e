"""MCP handler for the close_workspace tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="close_workspace",
    description=(
        "Close a workspace and discard its recorded run history and "
        "quarantine list."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY
        },
        "required": ["workspace_id"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    workspace_id = arguments.get("workspace_id")
    result = workspaces.close(workspace_id)
    if not result.success:
        return error_response(result)
    return json_response({"workspace_id": workspace_id, "closed": True})
