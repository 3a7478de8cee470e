"""MCP handler for the analyze_test_file tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...constants import FRAMEWORKS
from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="analyze_test_file",
    description=(
        "List the test cases declared in one test file with their line, "
        "inferred type, tags and, when runs were recorded, status and duration."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "test_file": {
                "type": "string",
                "description": "Test file path relative to the workspace root"
            },
            "framework": {
                "type": "string",
                "description": "Override the detected framework",
                "enum": list(FRAMEWORKS)
            }
        },
        "required": ["workspace_id", "test_file"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    service = create_intelligence_service(workspaces, arguments.get("workspace_id"))
    if not service.success:
        return error_response(service)

    result = service.data.analyze_file(
        arguments.get("test_file"),
        framework=arguments.get("framework"),
    )
    if not result.success:
        return error_response(result)

    return json_response({
        "file": arguments["test_file"],
        "total_tests": len(result.data),
        "tests": [case.to_dict() for case in result.data],
    })
