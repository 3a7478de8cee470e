"""MCP handler for the list_quarantined tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="list_quarantined",
    description="List quarantined tests with the reason each was quarantined.",
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
    service = create_intelligence_service(workspaces, arguments.get("workspace_id"))
    if not service.success:
        return error_response(service)

    quarantined = service.data.quarantined().unwrap()
    return json_response({
        "total": len(quarantined),
        "tests": [
            {"test_id": test_id, "reason": reason}
            for test_id, reason in sorted(quarantined.items())
        ],
    })
