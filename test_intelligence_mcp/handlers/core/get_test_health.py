"""MCP handler for the get_test_health tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="get_test_health",
    description=(
        "Score overall test suite health (0-100) from coverage and flakiness, "
        "with counts of slow and duplicate tests and recommendations."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "include_recommendations": {
                "type": "boolean",
                "description": "Include recommendations (default: true)"
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

    result = service.data.health()
    if not result.success:
        return error_response(result)

    return json_response(result.data.to_dict(
        include_recommendations=arguments.get("include_recommendations", True)
    ))
