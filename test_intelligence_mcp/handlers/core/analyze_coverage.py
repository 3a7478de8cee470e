"""MCP handler for the analyze_coverage tool (delegates to IntelligenceService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="analyze_coverage",
    description=(
        "Parse a coverage report (Istanbul JSON, LCOV or coverage.py JSON) "
        "into line, branch, function and statement totals. The report is "
        "located automatically unless a path is given."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "report_path": {
                "type": "string",
                "description": "Report path relative to the workspace root"
            },
            "include_files": {
                "type": "boolean",
                "description": "Include per-file coverage (default: false)"
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

    result = service.data.coverage(arguments.get("report_path"))
    if not result.success:
        return error_response(result)

    report = result.data
    if report is None:
        return json_response({
            "found": False,
            "message": "No coverage report found. Run your tests with coverage enabled."
        })

    response = {"found": True}
    response.update(report.to_dict())
    if arguments.get("include_files", False):
        response["files"] = [f.to_dict() for f in report.files]
    return json_response(response)
