"""MCP handler for the open_workspace tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry
from ..common import error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="open_workspace",
    description=(
        "Open a repository for test intelligence. Returns a workspace_id that "
        "every other tool takes. Run history and quarantine live with the "
        "workspace until it is closed."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "repo_path": {
                "type": "string",
                "description": "Path to the repository root"
            }
        },
        "required": ["repo_path"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    result = workspaces.open(arguments.get("repo_path"))
    if not result.success:
        return error_response(result)

    workspace = result.data
    return json_response({
        "workspace_id": workspace.workspace_id,
        "root": str(workspace.root),
        "framework": workspace.intelligence.detect_framework(),
    })
