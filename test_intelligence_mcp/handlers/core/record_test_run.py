"""MCP handler for the record_test_run tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="record_test_run",
    description=(
        "Record test results into the workspace run history. History feeds "
        "flaky detection, slow-test reports and test selection."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "results": {
                "type": "array",
                "description": "One entry per executed test",
                "items": {
                    "type": "object",
                    "properties": {
                        "test_id": {"type": "string"},
                        "test_name": {"type": "string"},
                        "file": {"type": "string"},
                        "passed": {"type": "boolean"},
                        "duration": {
                            "type": "number",
                            "description": "Duration in milliseconds"
                        },
                        "error": {"type": "string"},
                        "timestamp": {
                            "type": "string",
                            "description": "ISO-8601 time of the run (default: now)"
                        }
                    },
                    "required": ["test_id", "passed"]
                }
            }
        },
        "required": ["workspace_id", "results"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict, workspaces: WorkspaceRegistry) -> list[TextContent]:
    service = create_intelligence_service(workspaces, arguments.get("workspace_id"))
    if not service.success:
        return error_response(service)

    result = service.data.record(arguments.get("results"))
    if not result.success:
        return error_response(result)

    return json_response({"recorded": result.data})
