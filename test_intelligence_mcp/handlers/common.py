"""Response and argument helpers shared by the tool handlers."""

from __future__ import annotations

import json

from mcp.types import TextContent

from ..services import (
    ErrorCode,
    ServiceResult,
    WorkspaceRegistry,
    create_git_change_service,
)

WORKSPACE_ID_PROPERTY = {
    "type": "string",
    "description": "Workspace handle returned by open_workspace"
}


def json_response(payload) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


def error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]


def resolve_changed_files(
    workspaces: WorkspaceRegistry,
    arguments: dict
) -> ServiceResult[list[str]]:
    """
    The change set for impact tools.

    An explicit ``changed_files`` list wins; otherwise ``base_ref`` is
    diffed through git.
    """
    changed_files = arguments.get("changed_files")
    if changed_files is not None:
        if not isinstance(changed_files, list) or not all(
            isinstance(path, str) for path in changed_files
        ):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'changed_files' must be a list of paths"
            )
        return ServiceResult.ok(list(changed_files))

    base_ref = arguments.get("base_ref")
    if not base_ref:
        return ServiceResult.fail(
            ErrorCode.MISSING_INPUT,
            "Either 'changed_files' or 'base_ref' is required"
        )

    git = create_git_change_service(workspaces, arguments.get("workspace_id"))
    if not git.success:
        return git
    return git.data.changed_files(base_ref=base_ref)
