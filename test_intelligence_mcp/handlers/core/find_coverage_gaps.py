"""MCP handler for the find_coverage_gaps tool."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import WorkspaceRegistry, create_intelligence_service
from ..common import WORKSPACE_ID_PROPERTY, error_response, json_response

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="find_coverage_gaps",
    description=(
        "Find files whose line coverage is below a minimum, ranked by risk "
        "(critical, high, medium, low) with uncovered lines and a suggestion."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "workspace_id": WORKSPACE_ID_PROPERTY,
            "min_coverage": {
                "type": "number",
                "description": "Minimum line coverage percentage (default: 80)",
                "minimum": 0,
                "maximum": 100
            },
            "focus_files": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Only report files whose path contains one of these"
            },
            "ignore_generated": {
                "type": "boolean",
                "description": "Skip generated files (default: true)"
            },
            "report_path": {
                "type": "string",
                "description": "Report path relative to the workspace root"
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

    result = service.data.coverage_gaps(
        min_coverage=arguments.get("min_coverage", 80),
        focus_files=arguments.get("focus_files"),
        ignore_generated=arguments.get("ignore_generated", True),
        report_path=arguments.get("report_path"),
    )
    if not result.success:
        return error_response(result)

    gaps = result.data
    by_risk = {}
    for gap in gaps:
        by_risk[gap.risk] = by_risk.get(gap.risk, 0) + 1

    return json_response({
        "total_gaps": len(gaps),
        "by_risk": by_risk,
        "gaps": [gap.to_dict() for gap in gaps],
    })
