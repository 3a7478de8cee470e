"""MCP handler for the get_test_history tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="get_test_history",
    description=(
        "Return recorded runs from the last N days, for one test or for "
        "every tracked test."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "test_id": {
                "type": "string",
                "description": "Limit to one test id"
            },
            "days": {
                "type": "integer",
                "description": "Look-back window in days (default: 30)",
                "minimum": 1
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

    result = service.data.history(
        test_id=arguments.get("test_id"),
        days=arguments.get("days", 30),
    )
    if not result.success:
        return error_response(result)

    return json_response({
        test_id: [run.to_dict() for run in runs]
        for test_id, runs in result.data.items()
    })
