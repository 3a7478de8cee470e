"""MCP handler for the find_duplicate_tests tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="find_duplicate_tests",
    description=(
        "Find pairs of tests in the same file whose names are nearly "
        "identical, a common sign of copy-pasted tests."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "similarity_threshold": {
                "type": "number",
                "description": "Name similarity ratio in (0, 1] (default: 0.8)"
            }
        },
        "required": ["workspace_id"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    service = create_intelligence_service(workspaces, arguments.get("workspace_id"))
    if not service.success:
        return error_response(service)

    result = service.data.duplicates(arguments.get("similarity_threshold", 0.8))
    if not result.success:
        return error_response(result)

    return json_response({
        "total_duplicates": len(result.data),
        "pairs": [d.to_dict() for d in result.data],
    })
