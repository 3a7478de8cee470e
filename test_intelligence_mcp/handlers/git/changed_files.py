"""MCP handler for changed_files (delegates to GitChangeService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_git_change_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="changed_files",
    description=(
        "List files changed in the workspace relative to a git ref "
        "(staged, unstaged and optionally untracked). Feed the result into "
        "select_tests or get_impacted_tests."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "base_ref": {
                "type": "string",
                "description": "Git ref to diff against (default: HEAD)"
            },
            "include_untracked": {
                "type": "boolean",
                "description": "Include untracked files (default: true)"
            }
        },
        "required": ["workspace_id"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    service = create_git_change_service(workspaces, arguments.get("workspace_id"))
    if not service.success:
        return error_response(service)

    base_ref = arguments.get("base_ref") or "HEAD"
    result = service.data.changed_files(
        base_ref=base_ref,
        include_untracked=arguments.get("include_untracked", True)
    )
    if not result.success:
        return error_response(result)

    return json_response({
        "base_ref": base_ref,
        "count": len(result.data),
        "changed_files": result.data,
    })
